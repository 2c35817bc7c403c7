"""Application paths and the window title holder."""

from __future__ import annotations

from typing import Any


class Env:
    """Builds paths under the installation and the user's home directory."""

    def __init__(self, exec_dir: str, home: str) -> None:
        self.exec_dir = exec_dir
        self.user_dir = home + "/.tile_editor/"

    def build_data_path(self, filename: str) -> str:
        return self.exec_dir + "data/" + filename

    def build_assets_path(self, filename: str) -> str:
        return self.exec_dir + "assets/" + filename

    def build_user_path(self, filename: str) -> str:
        return self.user_dir + "/" + filename


class ScreenTitler:
    """Sets the title of a screen once one is assigned."""

    def __init__(self) -> None:
        self.screen: Any = None

    def set_screen(self, screen: Any) -> None:
        self.screen = screen

    def set_title(self, title: str) -> None:
        if self.screen is None:
            raise RuntimeError("cannot set title when screen is not assigned")
        self.screen.set_title(title)