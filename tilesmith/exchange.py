"""Application states and the data handed between them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class State(IntEnum):
    MIN = 0
    EDITOR = 1
    FILE_BROWSER = 2
    HELP = 3
    TILE_EDITOR_PROPERTIES = 4
    THING_EDITOR_PROPERTIES = 5
    POLY_EDITOR_PROPERTIES = 6
    PROPERTIES = 7
    LAYER_SELECTOR = 8
    MAX = 9


@dataclass
class ExchangeData:
    """Shared slots plus per-state marks signalling that data awaits a state."""

    file_browser_allow_create: bool = False
    file_browser_success: bool = False
    file_browser_invoker_id: int = 0
    current_layer: Any = None
    file_browser_choice: str = ""
    file_browser_title: str = ""
    layer: Any = None
    properties: Any = None
    properties_blueprint: Any = None
    blueprint: Any = None
    map: Any = None
    edited_thing: Any = None
    edited_thing_blueprint: Any = None
    edited_poly: Any = None
    edited_poly_blueprint: Any = None
    _marks: dict[int, bool] = field(
        default_factory=lambda: {state: False for state in range(State.MIN, State.MAX)},
        repr=False,
    )

    def has(self, state: int) -> bool:
        """Return True if data has been left for the state."""
        return self._marks[state]

    def put(self, state: int) -> None:
        if self._marks.get(state, False):
            raise RuntimeError("controller was already marked!")
        self._marks[state] = True

    def recover(self, state: int) -> None:
        if not self._marks.get(state, False):
            raise RuntimeError("controller was not marked!")
        self._marks[state] = False