"""Parser for session files describing the sets, grids and defaults of a map."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Callable

from tilesmith.model import (
    DefaultLayer,
    DefaultLayerType,
    GridData,
    MapBlueprint,
    PolyDefinitionTable,
    ThingCenter,
    ThingDefinitionTable,
    Tileset,
)
from tilesmith.parsing import (
    LineReader,
    ParseError,
    PolyParser,
    PropertyParser,
    ThingParser,
    generic_first_level,
    parse_color,
)

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_UNSIGNED_RE = re.compile(r"\s*\+?(\d+)")

_THING_CENTERS = {
    "center": ThingCenter.CENTER,
    "topleft": ThingCenter.TOP_LEFT,
    "topright": ThingCenter.TOP_RIGHT,
    "bottomright": ThingCenter.BOTTOM_RIGHT,
    "bottomleft": ThingCenter.BOTTOM_LEFT,
}

_LAYER_TYPES = {
    "tile": DefaultLayerType.TILE,
    "thing": DefaultLayerType.THING,
    "poly": DefaultLayerType.POLY,
}

SpriteTableLoader = Callable[[str], "dict[int, Any]"]


def _leading_int(text: str) -> int | None:
    match = _INT_RE.match(text)
    if match is None:
        return None
    value = int(match.group(1))
    return value if _INT_MIN <= value <= _INT_MAX else None


def _leading_unsigned(text: str) -> int | None:
    match = _UNSIGNED_RE.match(text)
    return None if match is None else int(match.group(1))


def _to_int(text: str, key: str) -> int:
    value = _leading_int(text)
    if value is None:
        raise ParseError(f"invalid int value for '{key}'")
    return value


class BlueprintParser:
    """Reads a session file and the property, thing and polygon files it refers to.

    Tileset sprite tables are read by ``sprite_table_loader``, which receives the
    path of the table file and returns a mapping of tile id to sprite frame.
    """

    def __init__(
        self,
        log: logging.Logger | None = None,
        sprite_table_loader: SpriteTableLoader | None = None,
    ) -> None:
        self.log = log or logging.getLogger(__name__)
        self.sprite_table_loader = sprite_table_loader
        self.config_file_dir = ""

    def parse_file(self, filename: str | Path) -> MapBlueprint:
        filename = str(filename)
        if not Path(filename).exists():
            raise FileNotFoundError(f"cannot find file '{filename}'")

        directory = os.path.dirname(filename)
        file_dir = directory + "/" if directory else ""
        self.log.debug("will use '%s' as relative path for the config file", file_dir)

        try:
            return self.parse_string(Path(filename).read_text(), file_dir)
        except (ParseError, OSError, ValueError) as error:
            raise ParseError(f"{error} on file {filename}") from error

    def parse_string(self, contents: str, file_dir: str = "") -> MapBlueprint:
        """Parse session text; relative file names are resolved against file_dir."""
        self.config_file_dir = file_dir
        blueprint = MapBlueprint()
        reader = LineReader(contents)
        properties_set = False
        default_layers: list[DefaultLayer] = []

        sections = {
            "begintileset": self._tile_mode,
            "beginobjectset": self._thing_mode,
            "beginpolyset": self._poly_mode,
            "beginsession": self._session_mode,
            "begingridsettings": self._grid_settings_mode,
        }

        try:
            while True:
                line = reader.read_line()
                if reader.is_eof():
                    break
                tag = line.split(None, 1)[0] if line.split() else ""

                if tag == "beginmapproperties":
                    if properties_set:
                        raise ParseError("only one mapproperty node can be specified")
                    self._map_property_mode(reader, blueprint)
                    properties_set = True
                elif tag == "begindefaultlayer":
                    default_layers.append(self._default_layer_mode(reader))
                elif tag in sections:
                    sections[tag](reader, blueprint)
                else:
                    raise ParseError(
                        f"unexpected '{tag}', expected beginmapproperties, "
                        "begintileset or beginobjectset"
                    )

            if not blueprint.gridsets:
                blueprint.gridsets[1] = GridData()

            for layer in default_layers:
                self._check_default_layer(layer, blueprint)

            blueprint.default_layers = default_layers
            return blueprint
        except (ParseError, OSError, ValueError) as error:
            raise ParseError(f"{error} line {reader.line_number}") from error

    @staticmethod
    def _check_default_layer(layer: DefaultLayer, blueprint: MapBlueprint) -> None:
        if layer.grid_id not in blueprint.gridsets:
            raise ParseError("non existing grid id for default layer")
        if not 0 <= layer.alpha <= 255:
            raise ParseError("bad alpha for default layer")

        if layer.type is DefaultLayerType.TILE and layer.set_id not in blueprint.tilesets:
            raise ParseError("non existing set id for default tile layer")
        if layer.type is DefaultLayerType.POLY and layer.set_id not in blueprint.polysets:
            raise ParseError("non existing set id for default polygon layer")
        if layer.type is DefaultLayerType.THING and layer.set_id not in blueprint.thingsets:
            raise ParseError("non existing set id for default thing layer")

    def _map_property_mode(self, reader: LineReader, blueprint: MapBlueprint) -> None:
        self.log.debug("entering map property mode")
        propmap = generic_first_level(reader, "endmapproperties", ["file"])
        filename = self.config_file_dir + propmap["file"]
        blueprint.properties = PropertyParser(True).read_file(filename)
        self.log.debug("read %d map properties from %s", len(blueprint.properties), filename)

    @staticmethod
    def _set_index(text: str, existing: dict) -> int:
        index = _leading_unsigned(text)
        if index is None:
            raise ParseError("invalid id value")
        if index in existing:
            raise ParseError("repeated id value")
        return index

    def _tile_mode(self, reader: LineReader, blueprint: MapBlueprint) -> None:
        self.log.debug("entering tile mode")
        propmap = generic_first_level(reader, "endtileset", ["file", "id", "image", "name"])
        index = self._set_index(propmap["id"], blueprint.tilesets)

        filename = self.config_file_dir + propmap["file"]
        imagefile = self.config_file_dir + propmap["image"]

        if self.sprite_table_loader is None:
            raise ParseError(f"no sprite table loader available to read '{filename}'")

        blueprint.tilesets[index] = Tileset(
            dict(self.sprite_table_loader(filename)), imagefile, propmap["name"]
        )
        self.log.debug(
            "read %d entries for tileset with index %d from %s",
            len(blueprint.tilesets[index].table),
            index,
            filename,
        )

    def _thing_mode(self, reader: LineReader, blueprint: MapBlueprint) -> None:
        self.log.debug("entering thing mode")
        propmap = generic_first_level(reader, "endobjectset", ["file", "id", "name"])
        index = self._set_index(propmap["id"], blueprint.thingsets)

        filename = self.config_file_dir + propmap["file"]
        blueprint.thingsets[index] = ThingDefinitionTable(
            propmap["name"], ThingParser().read_file(filename)
        )
        self.log.debug(
            "read %d entries for thingset with index %d from %s",
            len(blueprint.thingsets[index].table),
            index,
            filename,
        )

    def _poly_mode(self, reader: LineReader, blueprint: MapBlueprint) -> None:
        self.log.debug("entering poly mode")
        propmap = generic_first_level(reader, "endpolyset", ["file", "id", "name"])
        index = self._set_index(propmap["id"], blueprint.polysets)

        filename = self.config_file_dir + propmap["file"]
        blueprint.polysets[index] = PolyDefinitionTable(
            propmap["name"], PolyParser().read_file(filename)
        )
        self.log.debug(
            "read %d entries for polyset with index %d from %s",
            len(blueprint.polysets[index].table),
            index,
            filename,
        )

    def _session_mode(self, reader: LineReader, blueprint: MapBlueprint) -> None:
        self.log.debug("entering session mode")
        propmap = generic_first_level(
            reader,
            "endsession",
            ["thingcenter", "bgcolor", "fontcolor", "toolboxwidthpercent"],
            False,
        )

        thingcenter = propmap["thingcenter"]
        if thingcenter:
            try:
                blueprint.thing_center = _THING_CENTERS[thingcenter]
            except KeyError:
                raise ParseError(
                    "invalid value for thingcenter, valid values are center, topleft, "
                    "topright, bottomright and bottomleft"
                ) from None

        if propmap["bgcolor"]:
            blueprint.bg_color = parse_color(propmap["bgcolor"])
        if propmap["fontcolor"]:
            blueprint.font_color = parse_color(propmap["fontcolor"])

        if propmap["toolboxwidthpercent"]:
            percent = _to_int(propmap["toolboxwidthpercent"], "toolboxwidthpercent")
            if not 1 <= percent <= 100:
                raise ParseError("toolboxwidth percent must be between 1 and 100")
            blueprint.toolbox_width_percent = percent

    def _grid_settings_mode(self, reader: LineReader, blueprint: MapBlueprint) -> None:
        self.log.debug("entering grid settings mode")
        propmap = generic_first_level(
            reader,
            "endgridsettings",
            [
                "id",
                "name",
                "gridsize",
                "gridvruler",
                "gridhruler",
                "gridcolor",
                "gridrulercolor",
                "gridorigincolor",
                "gridsubcolor",
            ],
            False,
        )

        grid_id = _to_int(propmap["id"], "id")
        current = GridData(name=propmap["name"])
        blueprint.gridsets[grid_id] = current

        colors = {
            "gridcolor": "color",
            "gridrulercolor": "ruler_color",
            "gridorigincolor": "origin_color",
            "gridsubcolor": "subcolor",
        }
        for key, attribute in colors.items():
            if propmap[key]:
                setattr(current, attribute, parse_color(propmap[key]))

        numbers = {
            "gridsize": "size",
            "gridvruler": "vertical_ruler",
            "gridhruler": "horizontal_ruler",
        }
        for key, attribute in numbers.items():
            if propmap[key]:
                setattr(current, attribute, _to_int(propmap[key], key))

    def _default_layer_mode(self, reader: LineReader) -> DefaultLayer:
        propmap = generic_first_level(
            reader, "enddefaultlayer", ["name", "type", "setid", "gridid", "alpha"]
        )

        layer_type = _LAYER_TYPES.get(propmap["type"])
        if layer_type is None:
            raise ParseError("bad default layer type, must be tile, thing or poly")

        set_id = _leading_unsigned(propmap["setid"])
        if set_id is None:
            raise ParseError("invalid set id value for default layer")

        grid_id = _leading_unsigned(propmap["gridid"])
        if grid_id is None:
            raise ParseError("invalid grid id value for default layer")

        alpha = _leading_int(propmap["alpha"])
        if alpha is None:
            raise ParseError("invalid alpha value for default layer")

        self.log.debug("read default layer")
        return DefaultLayer(propmap["name"], layer_type, set_id, grid_id, alpha)