import pytest

from tilesmith.loader import MapLoader
from tilesmith.messages import MessageManager, NotifyEvent
from tilesmith.model import (
    Color,
    Map,
    Poly,
    PolyDefinition,
    PolyDefinitionTable,
    PolyLayer,
    PropertyDefinition,
    PropertyLink,
    PropertyManager,
    PropertyTable,
    Thing,
    ThingDefinition,
    ThingDefinitionTable,
    ThingLayer,
    Tile,
    TileLayer,
    Tileset,
    Winding,
)
from tilesmith.serializer import MapSerializer


def _grey():
    return Color(128, 128, 128, 128)


@pytest.fixture
def manager():
    return MessageManager(30)


@pytest.fixture
def loader(manager):
    thing_def = ThingDefinition(
        1,
        3,
        4,
        "crate",
        Color(10, 20, 30, 40),
        PropertyTable(
            int_properties={
                "width": PropertyDefinition("width", 5, "", PropertyLink.W),
                "red": PropertyDefinition("red", 200, "", PropertyLink.COLOR_RED),
            },
            string_properties={"label": PropertyDefinition("label", "none")},
        ),
    )
    poly_def = PolyDefinition(
        1,
        "zone",
        Color(1, 2, 3, 4),
        PropertyTable(
            int_properties={"opacity": PropertyDefinition("opacity", 50, "", PropertyLink.COLOR_ALPHA)}
        ),
    )
    return MapLoader(
        manager,
        {1: Tileset(table={1: "a", 2: "b"})},
        {1: ThingDefinitionTable("things", {1: thing_def})},
        {1: PolyDefinitionTable("polys", {1: poly_def})},
        PropertyTable(int_properties={"gravity": PropertyDefinition("gravity", 10)}),
    )


def _write(tmp_path, map_):
    path = tmp_path / "map.json"
    assert MapSerializer().to_file(map_, "1.0", path)
    return path


def _sample_map():
    return Map(
        layers=[
            TileLayer(1, 1, 255, "ground", [Tile(0, 0, 2), Tile(1, 0, 99)]),
            ThingLayer(
                1,
                1,
                255,
                "actors",
                [Thing(5, 5, 1, 1, 1, _grey(), PropertyManager(int_properties={"width": 7}))],
            ),
            PolyLayer(1, 1, 255, "zones", Winding.CLOCKWISE, [Poly([(0, 0), (4, 0), (4, 4)], 1, _grey())]),
        ]
    )


def test_load_fills_and_fixes(tmp_path, loader):
    path = _write(tmp_path, _sample_map())
    result = loader.load_from_file(path)

    assert result.properties.int_properties == {"gravity": 10}

    tiles = result.layers[0].data
    assert [tile.type for tile in tiles] == [2, 1]

    thing = result.layers[1].data[0]
    assert thing.properties.int_properties == {"width": 7, "red": 200}
    assert thing.properties.string_properties == {"label": "none"}
    assert (thing.w, thing.h) == (7, 4)
    assert thing.color == Color(200, 20, 30, 40)

    poly = result.layers[2].data[0]
    assert poly.properties.int_properties == {"opacity": 50}
    assert poly.color == Color(1, 2, 3, 50)


def test_load_success_message(tmp_path, loader, manager):
    path = _write(tmp_path, _sample_map())
    loader.load_from_file(path)
    assert len(manager) == 1
    assert manager.last() == f"loaded map {path} with 3 layers and 1 properties. f1 for help"


def test_missing_file_reports_errors(tmp_path, loader, manager):
    events = []
    manager.subscribe("watch", events.append)
    result = loader.load_from_file(tmp_path / "absent.json")
    assert result.layers == []
    assert manager.get() == [
        "there were errors loading the map, please check the log file",
        "map file does not exist",
    ]
    assert events == [NotifyEvent.ADD, NotifyEvent.ADD]
    assert result.properties.int_properties == {"gravity": 10}


def test_unknown_thing_type_raises(tmp_path, loader):
    map_ = Map(layers=[ThingLayer(1, 1, 255, "actors", [Thing(0, 0, 1, 1, 42, _grey())])])
    path = _write(tmp_path, map_)
    with pytest.raises(KeyError):
        loader.load_from_file(path)


def test_unknown_tileset_raises(tmp_path, loader):
    map_ = Map(layers=[TileLayer(5, 1, 255, "ground", [Tile(0, 0, 1)])])
    path = _write(tmp_path, map_)
    with pytest.raises(KeyError):
        loader.load_from_file(path)


def test_existing_map_property_kept(tmp_path, loader):
    map_ = Map(properties=PropertyManager(int_properties={"gravity": 3}))
    path = _write(tmp_path, map_)
    result = loader.load_from_file(path)
    assert result.properties.int_properties == {"gravity": 3}