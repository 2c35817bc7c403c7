"""Data types for map blueprints and for maps being edited."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class Color:
    """An RGBA colour with components from 0 to 255."""

    r: int
    g: int
    b: int
    a: int


@dataclass
class GridData:
    """Grid settings for a session."""

    name: str = "default"
    size: int = 32
    vertical_ruler: int = 8
    horizontal_ruler: int = 8
    color: Color = field(default_factory=lambda: Color(0, 0, 0, 255))
    subcolor: Color = field(default_factory=lambda: Color(0, 0, 0, 128))
    ruler_color: Color = field(default_factory=lambda: Color(0, 255, 0, 255))
    origin_color: Color = field(default_factory=lambda: Color(255, 255, 255, 255))


class DefaultLayerType(Enum):
    TILE = auto()
    THING = auto()
    POLY = auto()


@dataclass
class DefaultLayer:
    """A layer that every new map starts with."""

    name: str
    type: DefaultLayerType
    set_id: int
    grid_id: int
    alpha: int


class PropertyLink(Enum):
    """Entity attribute a property value is bound to."""

    NOTHING = auto()
    W = auto()
    H = auto()
    COLOR_RED = auto()
    COLOR_GREEN = auto()
    COLOR_BLUE = auto()
    COLOR_ALPHA = auto()


@dataclass
class PropertyDefinition(Generic[T]):
    """Blueprint of a single property: its name, default and description."""

    name: str
    default_value: T
    description: str = ""
    linked_to: PropertyLink = PropertyLink.NOTHING


@dataclass
class PropertyTable:
    """Property blueprints for a map or an entity type."""

    int_properties: dict[str, PropertyDefinition[int]] = field(default_factory=dict)
    double_properties: dict[str, PropertyDefinition[float]] = field(default_factory=dict)
    string_properties: dict[str, PropertyDefinition[str]] = field(default_factory=dict)
    property_names: list[str] = field(default_factory=list)

    def property_exists(self, key: str) -> bool:
        return (
            key in self.int_properties
            or key in self.string_properties
            or key in self.double_properties
        )

    def __len__(self) -> int:
        return (
            len(self.int_properties)
            + len(self.string_properties)
            + len(self.double_properties)
        )


@dataclass
class ThingDefinition:
    """Blueprint of a thing type."""

    type_id: int
    w: int
    h: int
    name: str
    color: Color
    properties: PropertyTable = field(default_factory=PropertyTable)


@dataclass
class PolyDefinition:
    """Blueprint of a polygon type."""

    poly_id: int
    name: str
    color: Color
    properties: PropertyTable = field(default_factory=PropertyTable)


@dataclass
class ThingDefinitionTable:
    name: str = ""
    table: dict[int, ThingDefinition] = field(default_factory=dict)


@dataclass
class PolyDefinitionTable:
    name: str = ""
    table: dict[int, PolyDefinition] = field(default_factory=dict)


@dataclass
class Tileset:
    """A sprite table keyed by tile id, with its image and display name."""

    table: dict[int, Any] = field(default_factory=dict)
    image_path: str = ""
    name: str = ""


class ThingCenter(Enum):
    CENTER = auto()
    TOP_LEFT = auto()
    TOP_RIGHT = auto()
    BOTTOM_RIGHT = auto()
    BOTTOM_LEFT = auto()


@dataclass
class MapBlueprint:
    """Everything a session knows about the kinds of map contents."""

    toolbox_width_percent: int = 33
    bg_color: Color = field(default_factory=lambda: Color(32, 32, 32, 0))
    font_color: Color = field(default_factory=lambda: Color(255, 255, 255, 0))
    thing_center: ThingCenter = ThingCenter.CENTER
    gridsets: dict[int, GridData] = field(default_factory=dict)
    tilesets: dict[int, Tileset] = field(default_factory=dict)
    thingsets: dict[int, ThingDefinitionTable] = field(default_factory=dict)
    polysets: dict[int, PolyDefinitionTable] = field(default_factory=dict)
    properties: PropertyTable = field(default_factory=PropertyTable)
    default_layers: list[DefaultLayer] = field(default_factory=list)


@dataclass
class PropertyManager:
    """Actual property values of a map or an entity."""

    int_properties: dict[str, int] = field(default_factory=dict)
    double_properties: dict[str, float] = field(default_factory=dict)
    string_properties: dict[str, str] = field(default_factory=dict)

    def has_property(self, key: str) -> bool:
        return (
            key in self.int_properties
            or key in self.string_properties
            or key in self.double_properties
        )

    def __len__(self) -> int:
        return (
            len(self.int_properties)
            + len(self.string_properties)
            + len(self.double_properties)
        )


@dataclass
class Tile:
    x: int
    y: int
    type: int


@dataclass
class Thing:
    """A logic object placed on the map."""

    x: int
    y: int
    w: int
    h: int
    type: int
    color: Color
    properties: PropertyManager = field(default_factory=PropertyManager)


@dataclass
class Poly:
    """A polygon whose points are (x, y) integer pairs."""

    points: list[tuple[int, int]]
    type: int
    color: Color
    properties: PropertyManager = field(default_factory=PropertyManager)


class Winding(Enum):
    CLOCKWISE = auto()
    COUNTERCLOCKWISE = auto()
    ANY = auto()


class LayerVisitor:
    """Dispatch target for Layer.accept; layers a visitor does not handle are ignored."""

    def visit_tile_layer(self, layer: TileLayer) -> Any:
        return None

    def visit_thing_layer(self, layer: ThingLayer) -> Any:
        return None

    def visit_poly_layer(self, layer: PolyLayer) -> Any:
        return None


@dataclass
class Layer(ABC):
    """Common part of every layer."""

    set: int
    gridset: int
    alpha: int
    id: str

    @abstractmethod
    def accept(self, visitor: LayerVisitor) -> Any:
        """Call the visitor method matching this layer's kind."""


@dataclass
class TileLayer(Layer):
    data: list[Tile] = field(default_factory=list)

    def accept(self, visitor: LayerVisitor) -> Any:
        return visitor.visit_tile_layer(self)


@dataclass
class ThingLayer(Layer):
    data: list[Thing] = field(default_factory=list)

    def accept(self, visitor: LayerVisitor) -> Any:
        return visitor.visit_thing_layer(self)


@dataclass
class PolyLayer(Layer):
    winding: Winding = Winding.CLOCKWISE
    data: list[Poly] = field(default_factory=list)

    def accept(self, visitor: LayerVisitor) -> Any:
        return visitor.visit_poly_layer(self)


@dataclass
class Map:
    """A map being edited."""

    layers: list[Layer] = field(default_factory=list)
    properties: PropertyManager = field(default_factory=PropertyManager)