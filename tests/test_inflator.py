import pytest

from tilesmith.inflator import inflate_poly, inflate_thing
from tilesmith.model import (
    Color,
    Poly,
    PolyDefinition,
    PropertyDefinition,
    PropertyLink,
    PropertyManager,
    PropertyTable,
    Thing,
    ThingDefinition,
)


def _table(*links):
    table = PropertyTable()
    for name, link in links:
        table.int_properties[name] = PropertyDefinition(name, 0, "", link)
    return table


def test_thing_takes_blueprint_size_and_color():
    blueprint = ThingDefinition(1, 16, 24, "box", Color(10, 20, 30, 40))
    thing = Thing(0, 0, 1, 1, 1, Color(128, 128, 128, 128))
    inflate_thing(thing, blueprint)
    assert (thing.w, thing.h) == (16, 24)
    assert thing.color == Color(10, 20, 30, 40)


def test_thing_linked_properties_override():
    table = _table(
        ("width", PropertyLink.W),
        ("height", PropertyLink.H),
        ("red", PropertyLink.COLOR_RED),
        ("alpha", PropertyLink.COLOR_ALPHA),
        ("other", PropertyLink.NOTHING),
    )
    blueprint = ThingDefinition(1, 16, 24, "box", Color(10, 20, 30, 40), table)
    props = PropertyManager(
        int_properties={"width": 50, "height": 60, "red": 70, "alpha": 80, "other": 90}
    )
    thing = Thing(0, 0, 1, 1, 1, Color(128, 128, 128, 128), props)
    inflate_thing(thing, blueprint)
    assert (thing.w, thing.h) == (50, 60)
    assert thing.color == Color(70, 20, 30, 80)


def test_thing_inflation_does_not_alter_blueprint_color():
    table = _table(("green", PropertyLink.COLOR_GREEN))
    blueprint = ThingDefinition(1, 4, 4, "t", Color(1, 2, 3, 4), table)
    thing = Thing(0, 0, 1, 1, 1, Color(0, 0, 0, 0), PropertyManager({"green": 99}))
    inflate_thing(thing, blueprint)
    assert thing.color.g == 99
    assert blueprint.color == Color(1, 2, 3, 4)


def test_thing_missing_linked_property_raises():
    table = _table(("width", PropertyLink.W))
    blueprint = ThingDefinition(1, 4, 4, "t", Color(1, 2, 3, 4), table)
    thing = Thing(0, 0, 1, 1, 1, Color(0, 0, 0, 0))
    with pytest.raises(KeyError):
        inflate_thing(thing, blueprint)


def test_poly_color_links_apply_and_size_links_ignored():
    table = _table(
        ("blue", PropertyLink.COLOR_BLUE),
        ("width", PropertyLink.W),
    )
    blueprint = PolyDefinition(2, "area", Color(5, 6, 7, 8), table)
    poly = Poly(
        [(0, 0), (4, 0), (4, 4)],
        2,
        Color(128, 128, 128, 128),
        PropertyManager({"blue": 200, "width": 33}),
    )
    inflate_poly(poly, blueprint)
    assert poly.color == Color(5, 6, 200, 8)
    assert poly.points == [(0, 0), (4, 0), (4, 4)]


def test_poly_missing_linked_property_raises():
    table = _table(("red", PropertyLink.COLOR_RED))
    blueprint = PolyDefinition(2, "area", Color(5, 6, 7, 8), table)
    poly = Poly([(0, 0), (1, 0), (1, 1)], 2, Color(0, 0, 0, 0))
    with pytest.raises(KeyError):
        inflate_poly(poly, blueprint)