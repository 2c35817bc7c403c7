"""Saves maps, ordering their contents first."""

from __future__ import annotations

import logging
from pathlib import Path

from tilesmith.model import LayerVisitor, Map, PolyLayer, ThingLayer, TileLayer
from tilesmith.serializer import MapSerializer

APP_VERSION = "1.1.10-bin"


def _centroid(points: list[tuple[int, int]]) -> tuple[float, float]:
    """Mean of the vertices."""
    count = len(points)
    return (
        sum(x for x, _ in points) / count,
        sum(y for _, y in points) / count,
    )


class _Sorter(LayerVisitor):
    """Orders layer contents top-down, then left to right."""

    def visit_tile_layer(self, layer: TileLayer) -> None:
        layer.data.sort(key=lambda tile: (-tile.y, tile.x))

    def visit_thing_layer(self, layer: ThingLayer) -> None:
        layer.data.sort(key=lambda thing: (-thing.y, thing.x))

    def visit_poly_layer(self, layer: PolyLayer) -> None:
        def key(poly):
            x, y = _centroid(poly.points)
            return (-y, x)

        layer.data.sort(key=key)


class MapSaver:
    """Writes maps to files; the map's contents may be reordered by saving."""

    def __init__(self, log: logging.Logger | None = None, version: str = APP_VERSION) -> None:
        self.log = log or logging.getLogger(__name__)
        self.version = version

    def save(self, map: Map, filename: str | Path) -> bool:
        """Order and write the map; return False if it could not be written."""
        self.log.info("saving map into %s", filename)
        self.pre_save(map)

        if not MapSerializer().to_file(map, self.version, filename):
            self.log.warning("could not save into %s", filename)
            return False

        self.log.info("map saved into %s", filename)
        return True

    def pre_save(self, map: Map) -> None:
        """Sort the contents of every layer top-down, left to right."""
        self.log.info("starting pre-save process...")
        sorter = _Sorter()
        for layer in map.layers:
            layer.accept(sorter)