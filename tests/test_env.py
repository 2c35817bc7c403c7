import pytest

from tilesmith.env import Env, ScreenTitler


def test_data_and_assets_paths():
    env = Env("/opt/app/", "/home/someone")
    assert env.build_data_path("help.txt") == "/opt/app/data/help.txt"
    assert env.build_assets_path("ttf/font.ttf") == "/opt/app/assets/ttf/font.ttf"


def test_user_path_is_under_home():
    env = Env("/opt/app/", "/home/someone")
    path = env.build_user_path("config.json")
    assert path.startswith("/home/someone/.tile_editor/")
    assert path.endswith("/config.json")


class _Screen:
    def __init__(self):
        self.titles = []

    def set_title(self, title):
        self.titles.append(title)


def test_set_title_without_screen_raises():
    with pytest.raises(RuntimeError):
        ScreenTitler().set_title("x")


def test_set_title_forwards_to_screen():
    screen = _Screen()
    titler = ScreenTitler()
    titler.set_screen(screen)
    titler.set_title("map.json")
    assert screen.titles == ["map.json"]