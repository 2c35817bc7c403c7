import json

from tilesmith.map_parser import MapParser
from tilesmith.model import (
    Color,
    Map,
    Poly,
    PolyLayer,
    PropertyManager,
    Thing,
    ThingLayer,
    Tile,
    TileLayer,
    Winding,
)
from tilesmith.serializer import MapSerializer


def _grey():
    return Color(128, 128, 128, 128)


def _sample_map():
    return Map(
        layers=[
            TileLayer(1, 2, 255, "ground", [Tile(4, 5, 3), Tile(-1, 0, 1)]),
            ThingLayer(
                2,
                1,
                200,
                "actors",
                [
                    Thing(
                        10,
                        20,
                        1,
                        1,
                        7,
                        _grey(),
                        PropertyManager(
                            int_properties={"hp": 3},
                            double_properties={"speed": 1.5},
                            string_properties={"label": "hero"},
                        ),
                    )
                ],
            ),
            PolyLayer(
                3,
                1,
                128,
                "zones",
                Winding.COUNTERCLOCKWISE,
                [
                    Poly(
                        [(0, 0), (10, 0), (10, 10)],
                        2,
                        _grey(),
                        PropertyManager(int_properties={"damage": 4}),
                    )
                ],
            ),
        ],
        properties=PropertyManager(
            int_properties={"width": 100}, string_properties={"title": "level one"}
        ),
    )


def test_empty_map_document():
    text = MapSerializer().to_string(Map(), "1.0")
    assert text == '{"meta":{"version":"1.0"},"attributes":{},"layers":[]}'


def test_tile_layer_document():
    map_ = Map(layers=[TileLayer(1, 2, 255, "ground", [Tile(4, 5, 3)])])
    text = MapSerializer().to_string(map_, "v")
    assert text == (
        '{"meta":{"version":"v"},"attributes":{},"layers":[{"meta":{"set":1,"gridset":2,'
        '"alpha":255,"type":"tiles","id":"ground"},"data":[{"t":3,"p":[4,5]}]}]}'
    )


def test_attribute_order_is_ints_doubles_strings():
    properties = PropertyManager(
        int_properties={"b": 1, "a": 2},
        double_properties={"c": 1.5},
        string_properties={"d": "x"},
    )
    text = MapSerializer().to_string(Map(properties=properties), "v")
    doc = json.loads(text, object_pairs_hook=list)
    attributes = dict(doc)["attributes"]
    assert [name for name, _ in attributes] == ["a", "b", "c", "d"]


def test_poly_meta_has_winding():
    text = MapSerializer().to_string(_sample_map(), "v")
    doc = json.loads(text)
    poly_meta = doc["layers"][2]["meta"]
    assert poly_meta["winding"] == "counterclockwise"
    assert poly_meta["type"] == "polys"
    assert doc["layers"][2]["data"][0]["p"] == [[0, 0], [10, 0], [10, 10]]


def test_round_trip_through_parser():
    original = _sample_map()
    text = MapSerializer().to_string(original, "2.3")
    parser = MapParser()
    parsed = parser.parse_string(text)
    assert parser.errors == []
    assert parser.version == "2.3"
    assert parsed == original


def test_to_file_writes_same_text(tmp_path):
    serializer = MapSerializer()
    path = tmp_path / "map.json"
    assert serializer.to_file(_sample_map(), "1.0", path) is True
    assert path.read_text(encoding="utf-8") == serializer.to_string(_sample_map(), "1.0")


def test_to_file_fails_on_directory(tmp_path):
    assert MapSerializer().to_file(Map(), "1.0", tmp_path) is False