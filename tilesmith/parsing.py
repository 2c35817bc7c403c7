"""Line-oriented readers and parsers for property, thing and polygon blueprint files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from tilesmith.model import (
    Color,
    PolyDefinition,
    PropertyDefinition,
    PropertyLink,
    PropertyTable,
    ThingDefinition,
)

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_SIZE_MAX = 2**64 - 1

_INT_RE = re.compile(r"[+-]?\d+")
_UNSIGNED_RE = re.compile(r"\+?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_WORD_RE = re.compile(r"\S+")


class ParseError(RuntimeError):
    """Raised when a blueprint file does not follow the expected syntax."""


class _Scanner:
    """Reads whitespace separated values one after another; once a read fails, all later reads fail."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self.failed = False

    def _take(self, pattern: re.Pattern[str]) -> str | None:
        if self.failed:
            return None
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1
        match = pattern.match(self._text, self._pos)
        if match is None:
            self.failed = True
            return None
        self._pos = match.end()
        return match.group()

    def read_int(self) -> int | None:
        token = self._take(_INT_RE)
        if token is None:
            return None
        value = int(token)
        if not _INT_MIN <= value <= _INT_MAX:
            self.failed = True
            return None
        return value

    def read_unsigned(self) -> int | None:
        token = self._take(_UNSIGNED_RE)
        if token is None:
            return None
        value = int(token)
        if value > _SIZE_MAX:
            self.failed = True
            return None
        return value

    def read_float(self) -> float | None:
        token = self._take(_FLOAT_RE)
        return None if token is None else float(token)

    def read_word(self) -> str | None:
        return self._take(_WORD_RE)


class LineReader:
    """Yields trimmed lines, skipping blank lines and lines starting with the comment character."""

    def __init__(self, text: str, comment: str = "#") -> None:
        self._lines = text.splitlines()
        self._index = 0
        self._comment = comment
        self._eof = False

    @classmethod
    def from_file(cls, path: str | Path) -> LineReader:
        return cls(Path(path).read_text())

    @property
    def line_number(self) -> int:
        """Number of physical lines consumed so far."""
        return self._index

    def read_line(self) -> str:
        """Return the next meaningful line, or an empty string once the input is exhausted."""
        while self._index < len(self._lines):
            line = self._lines[self._index].strip()
            self._index += 1
            if not line or line.startswith(self._comment):
                continue
            return line
        self._eof = True
        return ""

    def is_eof(self) -> bool:
        return self._eof


@dataclass
class ConfigPair:
    """A "name value" line as read from a blueprint file."""

    name: str = ""
    value: str = ""
    failed: bool = False
    disallowed: bool = False
    eof: bool = False


def read_pair(reader: LineReader, allowed: Iterable[str] | None = None) -> ConfigPair:
    """Read one line as a name followed by the rest of the line as its value."""
    result = ConfigPair()
    line = reader.read_line()
    if reader.is_eof():
        result.eof = True
        return result

    parts = line.split(None, 1)
    if parts:
        result.name = parts[0]
    if len(parts) < 2:
        result.failed = True
    else:
        result.value = parts[1].lstrip()

    if allowed is not None and result.name not in allowed:
        result.disallowed = True
    return result


def generic_first_level(
    reader: LineReader,
    end: str,
    properties: Iterable[str],
    strict: bool = True,
) -> dict[str, str]:
    """Read name/value lines up to the end word; every property must appear when strict."""
    propmap = {name: "" for name in properties}
    allowed = [*propmap, end]

    while True:
        pair = read_pair(reader, allowed)
        if pair.eof:
            raise ParseError(f"unexpected end of file before '{end}'")
        if pair.name == end:
            break
        if pair.disallowed:
            raise ParseError(f"unrecognised '{pair.name}', not within allowed properties")
        if pair.failed:
            raise ParseError("syntax error: expected property value")
        if propmap[pair.name]:
            raise ParseError(f"repeated property '{pair.name}'")
        propmap[pair.name] = pair.value

    if strict:
        for name in sorted(propmap):
            if not propmap[name]:
                raise ParseError(f"missing value for '{name}'")

    return propmap


def parse_color(text: str) -> Color:
    """Parse "r g b a" into a Color."""
    scanner = _Scanner(text)
    r, g, b, a = (scanner.read_int() for _ in range(4))
    if scanner.failed:
        raise ParseError(
            "invalid color schema, values are red, green, blue and alpha, "
            "all from 0 to 255 and separated by spaces"
        )
    return Color(r, g, b, a)


def _first_word(line: str) -> str:
    parts = line.split(None, 1)
    return parts[0] if parts else ""


_LINKS = {
    "w": PropertyLink.W,
    "h": PropertyLink.H,
    "colorred": PropertyLink.COLOR_RED,
    "colorgreen": PropertyLink.COLOR_GREEN,
    "colorblue": PropertyLink.COLOR_BLUE,
    "coloralpha": PropertyLink.COLOR_ALPHA,
    "nothing": PropertyLink.NOTHING,
}


class PropertyParser:
    """Reads property blueprints; in map mode properties cannot be linked."""

    def __init__(self, map_mode: bool) -> None:
        self.map_mode = map_mode

    def read_file(self, path: str | Path) -> PropertyTable:
        if not Path(path).exists():
            raise FileNotFoundError(f"cannot find properties file '{path}'")

        reader = LineReader.from_file(path)
        result = PropertyTable()
        while True:
            line = reader.read_line()
            if reader.is_eof():
                break
            tag = _first_word(line)
            if tag != "beginproperty":
                raise ParseError(f"unexpected '{tag}', expected beginproperty")
            self.read(reader, result)
        return result

    def read(self, reader: LineReader, table: PropertyTable) -> None:
        """Read one property block (after its begin line) into the table."""
        propnames = ["name", "type", "default", "comment"]
        if not self.map_mode:
            propnames.append("linkedto")

        propmap = generic_first_level(reader, "endproperty", propnames)
        name = propmap["name"]

        if table.property_exists(name):
            raise ParseError(f"property '{name}' already exists")

        linked_to = PropertyLink.NOTHING
        if not self.map_mode:
            try:
                linked_to = _LINKS[propmap["linkedto"]]
            except KeyError:
                raise ParseError(f"invalid link type '{propmap['linkedto']}'") from None

        kind = propmap["type"]
        scanner = _Scanner(propmap["default"])
        if kind == "int":
            target = table.int_properties
            value = scanner.read_int()
        elif kind == "string":
            if linked_to is not PropertyLink.NOTHING:
                raise ParseError(f"string property '{name}' cannot be linked")
            target = table.string_properties
            value = scanner.read_word()
        elif kind == "double":
            if linked_to is not PropertyLink.NOTHING:
                raise ParseError(f"double property '{name}' cannot be linked")
            target = table.double_properties
            value = scanner.read_float()
        else:
            raise ParseError(f"invalid property type '{kind}', expected int, double or string")

        if scanner.failed:
            raise ParseError("invalid property value")

        target[name] = PropertyDefinition(name, value, propmap["comment"], linked_to)
        table.property_names.append(name)


def _read_entity(
    reader: LineReader,
    end: str,
    keys: Iterable[str],
) -> tuple[dict[str, str], PropertyTable]:
    """Read key/value lines and nested property blocks up to the end word."""
    table = PropertyTable()
    values = {key: "" for key in keys}

    while True:
        pair = read_pair(reader)
        if pair.eof:
            raise ParseError(f"unexpected file end before '{end}'")
        if pair.name == "beginproperty":
            PropertyParser(False).read(reader, table)
            continue
        if pair.name == end:
            break
        if pair.failed:
            raise ParseError(f"missing property value for '{pair.name}'")
        if pair.name not in values:
            raise ParseError(f"unknown property name '{pair.name}'")
        if values[pair.name]:
            raise ParseError(f"repeated property '{pair.name}'")
        values[pair.name] = pair.value

    for key in sorted(values):
        if not values[key]:
            raise ParseError(f"missing property '{key}'")

    return values, table


def _read_blocks(filename: str | Path, begin: str, parse_block) -> dict:
    if not Path(filename).exists():
        raise FileNotFoundError(f"cannot find file '{filename}'")

    reader = LineReader.from_file(filename)
    result: dict = {}
    try:
        while True:
            line = reader.read_line()
            if reader.is_eof():
                break
            tag = _first_word(line)
            if tag != begin:
                raise ParseError(f"unexpected '{tag}', expected beginobject")
            parse_block(reader, result)
    except (ParseError, ValueError) as error:
        raise ParseError(f"{error} on file {filename} line {reader.line_number}") from error
    return result


class ThingParser:
    """Reads a file of thing definitions."""

    def read_file(self, filename: str | Path) -> dict[int, ThingDefinition]:
        return _read_blocks(filename, "beginobject", self._parse_object)

    @staticmethod
    def _convert(values: dict[str, str], key: str, unsigned: bool = False) -> int:
        scanner = _Scanner(values[key])
        value = scanner.read_unsigned() if unsigned else scanner.read_int()
        if scanner.failed:
            raise ParseError(f"invalid value for property '{key}'")
        return value

    def _parse_object(self, reader: LineReader, result: dict[int, ThingDefinition]) -> None:
        values, table = _read_entity(reader, "endobject", ("id", "name", "w", "h", "color"))

        type_id = self._convert(values, "id", unsigned=True)
        if type_id in result:
            raise ParseError("repeated thing definition id")

        w = self._convert(values, "w")
        h = self._convert(values, "h")
        color = parse_color(values["color"])

        result[type_id] = ThingDefinition(type_id, w, h, values["name"], color, table)


class PolyParser:
    """Reads a file of polygon definitions."""

    def read_file(self, filename: str | Path) -> dict[int, PolyDefinition]:
        return _read_blocks(filename, "beginpoly", self._parse_poly)

    def _parse_poly(self, reader: LineReader, result: dict[int, PolyDefinition]) -> None:
        values, table = _read_entity(reader, "endpoly", ("id", "name", "color"))

        for definition in table.int_properties.values():
            if definition.linked_to in (PropertyLink.W, PropertyLink.H):
                raise ParseError("polygon properties cannot be linked to width or height")

        scanner = _Scanner(values["id"])
        poly_id = scanner.read_unsigned()
        if scanner.failed:
            raise ParseError("invalid id value")
        if poly_id in result:
            raise ParseError("repeated poly definition id")

        color = parse_color(values["color"])
        result[poly_id] = PolyDefinition(poly_id, values["name"], color, table)