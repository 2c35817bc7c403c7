"""Writes maps as compact JSON documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tilesmith.model import (
    LayerVisitor,
    Map,
    PolyLayer,
    PropertyManager,
    ThingLayer,
    TileLayer,
    Winding,
)

_WINDING_NAMES = {
    Winding.CLOCKWISE: "clockwise",
    Winding.COUNTERCLOCKWISE: "counterclockwise",
    Winding.ANY: "any",
}


def _attributes(properties: PropertyManager) -> dict[str, Any]:
    """Integer, then double, then string properties, each group sorted by name."""
    result: dict[str, Any] = {}
    for group in (
        properties.int_properties,
        properties.double_properties,
        properties.string_properties,
    ):
        for name in sorted(group):
            result[name] = group[name]
    return result


class _LayerWriter(LayerVisitor):
    """Turns each kind of layer into its JSON node."""

    def visit_tile_layer(self, layer: TileLayer) -> dict[str, Any]:
        return {
            "meta": {
                "set": layer.set,
                "gridset": layer.gridset,
                "alpha": layer.alpha,
                "type": "tiles",
                "id": layer.id,
            },
            "data": [{"t": tile.type, "p": [tile.x, tile.y]} for tile in layer.data],
        }

    def visit_thing_layer(self, layer: ThingLayer) -> dict[str, Any]:
        return {
            "meta": {
                "set": layer.set,
                "gridset": layer.gridset,
                "alpha": layer.alpha,
                "type": "things",
                "id": layer.id,
            },
            "data": [
                {
                    "t": thing.type,
                    "p": [thing.x, thing.y],
                    "a": _attributes(thing.properties),
                }
                for thing in layer.data
            ],
        }

    def visit_poly_layer(self, layer: PolyLayer) -> dict[str, Any]:
        return {
            "meta": {
                "set": layer.set,
                "gridset": layer.gridset,
                "alpha": layer.alpha,
                "type": "polys",
                "winding": _WINDING_NAMES[layer.winding],
                "id": layer.id,
            },
            "data": [
                {
                    "t": poly.type,
                    "p": [[x, y] for x, y in poly.points],
                    "a": _attributes(poly.properties),
                }
                for poly in layer.data
            ],
        }


class MapSerializer:
    """Serializes a map together with the version of the program that wrote it."""

    def __init__(self) -> None:
        self.errors: list[str] = []

    def to_string(self, map: Map, version: str) -> str:
        writer = _LayerWriter()
        document = {
            "meta": {"version": version},
            "attributes": _attributes(map.properties),
            "layers": [layer.accept(writer) for layer in map.layers],
        }
        return json.dumps(document, separators=(",", ":"), ensure_ascii=False, allow_nan=False)

    def to_file(self, map: Map, version: str, filename: str | Path) -> bool:
        """Write the map to a file; return False if the file cannot be written."""
        text = self.to_string(map, version)
        try:
            with open(filename, "w", encoding="utf-8") as handle:
                handle.write(text)
        except OSError:
            return False
        return True