"""Fill editor attributes of entities from their blueprints and linked properties."""

from __future__ import annotations

from dataclasses import replace

from tilesmith.model import Poly, PolyDefinition, PropertyLink, Thing, ThingDefinition

_COLOR_LINKS = {
    PropertyLink.COLOR_RED: "r",
    PropertyLink.COLOR_GREEN: "g",
    PropertyLink.COLOR_BLUE: "b",
    PropertyLink.COLOR_ALPHA: "a",
}


def inflate_thing(thing: Thing, blueprint: ThingDefinition) -> None:
    """Set size and colour of a thing from its blueprint, then from linked properties."""
    thing.w = blueprint.w
    thing.h = blueprint.h
    thing.color = replace(blueprint.color)

    for definition in blueprint.properties.int_properties.values():
        link = definition.linked_to
        if link is PropertyLink.NOTHING:
            continue
        value = thing.properties.int_properties[definition.name]
        if link is PropertyLink.W:
            thing.w = value
        elif link is PropertyLink.H:
            thing.h = value
        else:
            setattr(thing.color, _COLOR_LINKS[link], value)


def inflate_poly(poly: Poly, blueprint: PolyDefinition) -> None:
    """Set the colour of a polygon from its blueprint, then from linked properties."""
    poly.color = replace(blueprint.color)

    for definition in blueprint.properties.int_properties.values():
        channel = _COLOR_LINKS.get(definition.linked_to)
        if channel is not None:
            setattr(poly.color, channel, poly.properties.int_properties[definition.name])