"""Loads map files and completes them against the session blueprints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from tilesmith.inflator import inflate_poly, inflate_thing
from tilesmith.map_parser import MapParser
from tilesmith.messages import MessageManager
from tilesmith.model import (
    Map,
    PolyDefinitionTable,
    PolyLayer,
    PropertyDefinition,
    PropertyTable,
    ThingDefinitionTable,
    ThingLayer,
    TileLayer,
    Tileset,
)


class MapLoader:
    """Reads a map, fills in missing properties and repairs unknown tile types."""

    def __init__(
        self,
        message_manager: MessageManager,
        tilesets: dict[int, Tileset],
        thingsets: dict[int, ThingDefinitionTable],
        polysets: dict[int, PolyDefinitionTable],
        map_property_blueprints: PropertyTable,
        log: logging.Logger | None = None,
    ) -> None:
        self.message_manager = message_manager
        self.tilesets = tilesets
        self.thingsets = thingsets
        self.polysets = polysets
        self.map_property_blueprints = map_property_blueprints
        self.log = log or logging.getLogger(__name__)

    def load_from_file(self, path: str | Path) -> Map:
        parser = MapParser()
        result = parser.parse_file(path)

        self._inflate_properties(result)
        self._fix_invalid_indexes(result)

        for message in parser.errors:
            self.log.info("%s", message)
            self.message_manager.add(message)

        if parser.errors:
            self.message_manager.add("there were errors loading the map, please check the log file")
        else:
            message = (
                f"loaded map {path} with {len(result.layers)} layers and "
                f"{len(result.properties)} properties. f1 for help"
            )
            self.log.info("%s", message)
            self.message_manager.add(message)

        return result

    def _fix_invalid_indexes(self, map: Map) -> None:
        for layer in (layer for layer in map.layers if isinstance(layer, TileLayer)):
            self.log.info("reviewing layer %s...", layer.id)
            table = self.tilesets[layer.set].table
            for tile in layer.data:
                if tile.type not in table:
                    tile.type = min(table)
                    self.log.info("fixed missing index %s", tile.type)

    def _add_missing(
        self, blueprint: dict[str, PropertyDefinition[Any]], values: dict[str, Any]
    ) -> None:
        for key in sorted(blueprint):
            definition = blueprint[key]
            if definition.name not in values:
                values[definition.name] = definition.default_value
                self.log.info(
                    "added missing property '%s' with value '%s'",
                    definition.name,
                    definition.default_value,
                )

    def _add_all_missing(self, table: PropertyTable, properties) -> None:
        self._add_missing(table.int_properties, properties.int_properties)
        self._add_missing(table.string_properties, properties.string_properties)
        self._add_missing(table.double_properties, properties.double_properties)

    def _inflate_properties(self, map: Map) -> None:
        self._add_all_missing(self.map_property_blueprints, map.properties)

        for layer in map.layers:
            if isinstance(layer, ThingLayer):
                for thing in layer.data:
                    blueprint = self.thingsets[layer.set].table[thing.type]
                    self._add_all_missing(blueprint.properties, thing.properties)
                    inflate_thing(thing, blueprint)
            elif isinstance(layer, PolyLayer):
                for poly in layer.data:
                    blueprint = self.polysets[layer.set].table[poly.type]
                    self._add_all_missing(blueprint.properties, poly.properties)
                    inflate_poly(poly, blueprint)