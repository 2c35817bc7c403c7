"""Lenient reader for map files: loads whatever it can and records everything it skipped."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Iterable

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

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_INT64_MIN = -(2**63)
_UINT64_MAX = 2**64 - 1
_SIZE_MODULUS = 2**64

_DEFAULT_COLOR = (128, 128, 128, 128)

_WINDINGS = {
    "clockwise": Winding.CLOCKWISE,
    "counterclockwise": Winding.COUNTERCLOCKWISE,
    "any": Winding.ANY,
}


class _JsonObject(dict):
    """A JSON object that keeps every member, repeated names included; lookups see the first."""

    def __init__(self, pairs: Iterable[tuple[str, Any]]) -> None:
        super().__init__()
        self.pairs = list(pairs)
        for key, value in self.pairs:
            self.setdefault(key, value)

    @property
    def member_count(self) -> int:
        return len(self.pairs)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid value {name}")


def _is_object(value: Any) -> bool:
    return isinstance(value, _JsonObject)


def _is_array(value: Any) -> bool:
    return isinstance(value, list)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_int(value: Any) -> bool:
    return type(value) is int and _INT_MIN <= value <= _INT_MAX


def _is_double(value: Any) -> bool:
    if type(value) is float:
        return True
    # Integers too large for any integer type are held as doubles.
    return type(value) is int and not _INT64_MIN <= value <= _UINT64_MAX


def _as_size(value: int) -> int:
    return value % _SIZE_MODULUS


class _LayerKind(Enum):
    TILES = auto()
    THINGS = auto()
    POLYS = auto()
    BAD = auto()


@dataclass
class _Meta:
    set: int
    gridset: int
    alpha: int
    id: str
    kind: _LayerKind
    winding: Winding = Winding.CLOCKWISE


class MapParser:
    """Parses map documents, never giving up: problems end up in ``errors``."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.version = ""
        self._default_id_count = 0

    def parse_file(self, filename: str | Path) -> Map:
        self.errors = []
        self.version = ""
        path = Path(filename)
        if not path.exists():
            self.errors.append("map file does not exist")
            return Map()
        return self.parse_string(path.read_text())

    def parse_string(self, contents: str) -> Map:
        result = Map()
        self.errors = []
        self.version = ""

        try:
            doc = json.loads(
                contents,
                object_pairs_hook=_JsonObject,
                parse_constant=_reject_constant,
            )
        except ValueError as error:
            self.errors.append(f"could not parse json: {error}")
            return result

        if not _is_object(doc):
            self.errors.append("json root node must be an object")
            return result

        try:
            self._parse_meta(doc)
            self._parse_map_attributes(doc, result)
            self._parse_layers(doc, result)
        except (KeyError, TypeError, ValueError, IndexError) as error:
            self.errors.append(f"fatal error, map is likely not loaded: {error}")

        return result

    def _parse_meta(self, doc: _JsonObject) -> None:
        if "meta" not in doc:
            self.errors.append("no 'meta' node found, metadata will be skipped")
            return
        meta = doc["meta"]
        if not _is_object(meta):
            self.errors.append("'meta' node must be an object, metadata will be skipped")
            return
        if "version" not in meta:
            self.errors.append("'meta' node must contain version, version will be skipped")
        elif not _is_string(meta["version"]):
            self.errors.append(
                "'meta' node must contain version as a string, version will be skipped"
            )
        else:
            self.version = meta["version"]

    def _parse_map_attributes(self, doc: _JsonObject, target: Map) -> None:
        if "attributes" not in doc:
            self.errors.append("no 'attributes' node found, attributes will be skipped")
            return
        if not _is_object(doc["attributes"]):
            self.errors.append("'attributes' node must be an object, attributes will be skipped")
            return
        self._parse_attributes(doc["attributes"], target.properties)

    def _parse_layers(self, doc: _JsonObject, target: Map) -> None:
        if "layers" not in doc:
            self.errors.append("no 'layers' node found, layers will be skipped")
            return
        if not _is_array(doc["layers"]):
            self.errors.append("'layers' node must be an array, layers will be skipped")
            return

        handlers = {
            _LayerKind.TILES: self._parse_tile_layer,
            _LayerKind.THINGS: self._parse_thing_layer,
            _LayerKind.POLYS: self._parse_poly_layer,
        }

        for node in doc["layers"]:
            if not _is_object(node):
                self.errors.append(
                    "layer must be an object, cannot locate meta, skipping layer meta"
                )
                continue
            meta = self._parse_meta_node(node)
            if meta.kind is _LayerKind.BAD:
                continue
            handlers[meta.kind](node, meta, target)

    def _check_position(self, item: _JsonObject, kind: str) -> bool:
        position = item["p"]
        if not _is_array(position):
            self.errors.append(f"{kind} item 'p' is not an array, skipping item")
            return False
        if len(position) != 2:
            self.errors.append(f"{kind} item 'p' must have exactly two elements, skipping item")
            return False
        if not _is_int(position[0]):
            self.errors.append(
                f"{kind} item 'p' must have an integer as its first value, skipping item"
            )
            return False
        if not _is_int(position[1]):
            self.errors.append(
                f"{kind} item 'p' must have an integer as its second value, skipping item"
            )
            return False
        return True

    def _check_item_head(self, item: Any, kind: str, skip: str) -> bool:
        """Check the object shape and the 't' and 'p' presence common to all items."""
        if not _is_object(item):
            self.errors.append(f"{kind} item is not an object, skipping {skip}")
            return False
        if "t" not in item:
            self.errors.append(f"{kind} item has no 't' property, skipping {skip}")
            return False
        if not _is_int(item["t"]):
            self.errors.append(f"{kind} item 't' is not an integer, skipping {skip}")
            return False
        if "p" not in item:
            self.errors.append(f"{kind} item has no 'p' property, skipping {skip}")
            return False
        return True

    def _read_item_attributes(self, item: _JsonObject, kind: str, skip: str) -> PropertyManager | None:
        if "a" not in item:
            self.errors.append(f"{kind} item has no 'a' property, skipping {skip}")
            return None
        if not _is_object(item["a"]):
            self.errors.append(f"{kind} item 'a' is not an object, skipping {skip}")
            return None
        properties = PropertyManager()
        self._parse_attributes(item["a"], properties)
        return properties

    def _parse_tile_layer(self, node: _JsonObject, meta: _Meta, target: Map) -> None:
        if not _is_object(node):
            self.errors.append("tile layer node must be an object, skipping layer")
            return
        if not self._check_data_node(node, "tile"):
            return

        layer = TileLayer(meta.set, meta.gridset, meta.alpha, meta.id, [])
        if meta.alpha == 0:
            self.errors.append("warning, zero alpha layer detected, will not be shown!")

        for item in node["data"]:
            if not self._check_item_head(item, "tile", "item"):
                continue
            if not self._check_position(item, "tile"):
                continue
            x, y = item["p"]
            layer.data.append(Tile(x, y, _as_size(item["t"])))
            if item.member_count > 2:
                self.errors.append("tile layer item has extraneous members that will be skipped")

        if node.member_count > 2:
            self.errors.append("tile layer node has extraneous members that will be skipped")

        target.layers.append(layer)

    def _parse_thing_layer(self, node: _JsonObject, meta: _Meta, target: Map) -> None:
        if not _is_object(node):
            self.errors.append("thing layer node must be an object, skipping layer")
            return
        if not self._check_data_node(node, "thing"):
            return

        layer = ThingLayer(meta.set, meta.gridset, meta.alpha, meta.id, [])

        for item in node["data"]:
            if not self._check_item_head(item, "thing", "item"):
                continue
            if not self._check_position(item, "thing"):
                continue
            properties = self._read_item_attributes(item, "thing", "item")
            if properties is None:
                continue
            x, y = item["p"]
            # Size and colour depend on the thing type; the loader fills them in.
            layer.data.append(
                Thing(x, y, 1, 1, _as_size(item["t"]), Color(*_DEFAULT_COLOR), properties)
            )
            if item.member_count > 3:
                self.errors.append("thing layer item has extraneous members that will be skipped")

        if node.member_count > 2:
            self.errors.append("thing layer node has extraneous members that will be skipped")

        target.layers.append(layer)

    def _read_points(self, raw_points: list) -> list[tuple[int, int]] | None:
        points: list[tuple[int, int]] = []
        for point in raw_points:
            if not _is_array(point):
                self.errors.append("poly item point must be an array, skipping poly")
                return None
            if len(point) != 2:
                self.errors.append("poly item point must have exactly two items, skipping poly")
                return None
            if not _is_int(point[0]):
                self.errors.append(
                    "poly item point first component must be an integer, skipping poly"
                )
                return None
            if not _is_int(point[1]):
                self.errors.append(
                    "poly item point second component must be an integer, skipping poly"
                )
                return None
            points.append((point[0], point[1]))
        return points

    def _parse_poly_layer(self, node: _JsonObject, meta: _Meta, target: Map) -> None:
        if not _is_object(node):
            self.errors.append("poly layer node must be an object, skipping layer")
            return
        if not self._check_data_node(node, "poly"):
            return

        layer = PolyLayer(meta.set, meta.gridset, meta.alpha, meta.id, meta.winding, [])

        for item in node["data"]:
            if not self._check_item_head(item, "poly", "poly"):
                continue
            if not _is_array(item["p"]):
                self.errors.append("poly item 'p' is not an array, skipping poly")
                continue
            if len(item["p"]) < 3:
                self.errors.append(
                    "poly item 'p' must have at least 3 vertices represented by "
                    "three arrays, skipping poly"
                )
                continue
            points = self._read_points(item["p"])
            if points is None:
                continue
            properties = self._read_item_attributes(item, "poly", "poly")
            if properties is None:
                continue
            layer.data.append(
                Poly(points, _as_size(item["t"]), Color(*_DEFAULT_COLOR), properties)
            )
            if item.member_count > 3:
                self.errors.append("poly layer item has extraneous members that will be skipped")

        if node.member_count > 2:
            self.errors.append("poly layer node has extraneous members that will be skipped")

        target.layers.append(layer)

    def _node_exists(self, meta: _JsonObject, key: str) -> bool:
        if key not in meta:
            self.errors.append(
                f"meta node in layer has no '{key}' member, a default may be used if possible"
            )
            return False
        return True

    def _int_can_be_extracted(self, meta: _JsonObject, key: str) -> bool:
        if not self._node_exists(meta, key):
            return False
        if not _is_int(meta[key]):
            self.errors.append(
                f"meta:{key} node is not an integer, a default may be used if possible"
            )
            return False
        return True

    def _string_can_be_extracted(self, meta: _JsonObject, key: str) -> bool:
        if not self._node_exists(meta, key):
            return False
        if not _is_string(meta[key]):
            self.errors.append(
                f"meta:{key} node is not a string, a default may be used if possible"
            )
            return False
        if not meta[key]:
            self.errors.append(
                f"meta:{key} is an empty string, a default may be used if possible"
            )
            return False
        return True

    def _parse_meta_node(self, layer: _JsonObject) -> _Meta:
        if "meta" not in layer:
            self.errors.append("missing meta node in layer, skipping layer meta")
            return _Meta(0, 0, 0, self._generate_default_id(), _LayerKind.BAD)

        meta = layer["meta"]
        if not _is_object(meta):
            self.errors.append("meta node in layer must be an object, skipping layer meta")
            return _Meta(0, 0, 0, self._generate_default_id(), _LayerKind.BAD)

        if not self._string_can_be_extracted(meta, "type"):
            self.errors.append("meta node does not contain type: cannot be parsed")
            return _Meta(0, 0, 0, "", _LayerKind.BAD)

        kinds = {"tiles": _LayerKind.TILES, "things": _LayerKind.THINGS, "polys": _LayerKind.POLYS}
        kind = kinds.get(meta["type"])
        if kind is None:
            self.errors.append(f"unkown meta node type '{meta['type']}', cannot be parsed")
            return _Meta(0, 0, 0, "", _LayerKind.BAD)

        result = _Meta(0, 0, 0, "", kind)
        if self._int_can_be_extracted(meta, "alpha"):
            result.alpha = meta["alpha"]
        if self._int_can_be_extracted(meta, "set"):
            result.set = _as_size(meta["set"])
        if self._int_can_be_extracted(meta, "gridset"):
            result.gridset = _as_size(meta["gridset"])
        else:
            result.gridset = 1

        result.id = (
            meta["id"]
            if self._string_can_be_extracted(meta, "id")
            else self._generate_default_id()
        )

        if kind is _LayerKind.POLYS:
            if not self._string_can_be_extracted(meta, "winding"):
                self.errors.append("meta node for poly does not contain winding: cannot be parsed")
                return _Meta(0, 0, 0, "", _LayerKind.BAD)
            winding = _WINDINGS.get(meta["winding"])
            if winding is None:
                self.errors.append("meta node for poly contains invalid winding value")
                return _Meta(0, 0, 0, "", _LayerKind.BAD)
            result.winding = winding
            if meta.member_count > 6:
                self.errors.append(
                    "meta node in poly layer has extraneous members which will be ignored"
                )
        elif meta.member_count > 5:
            self.errors.append("meta node in layer has extraneous members which will be ignored")

        return result

    def _check_data_node(self, node: _JsonObject, kind: str) -> bool:
        if "data" not in node:
            self.errors.append(f"missing data in {kind} layer, skipping layer")
            return False
        if not _is_array(node["data"]):
            self.errors.append(f"data in {kind} layer is not an array, skipping layer")
            return False
        return True

    def _parse_attributes(self, item: _JsonObject, properties: PropertyManager) -> None:
        for name, value in item.pairs:
            if properties.has_property(name):
                self.errors.append(f"'{name}' already exists as attribute, skipping property")
                continue
            if _is_int(value):
                properties.int_properties[name] = value
            elif _is_double(value):
                properties.double_properties[name] = float(value)
            elif _is_string(value):
                properties.string_properties[name] = value
            else:
                self.errors.append(
                    f"invalid data type in attribute, skipping property '{name}'"
                )

    def _generate_default_id(self) -> str:
        self._default_id_count += 1
        return f"default_id_{self._default_id_count}"