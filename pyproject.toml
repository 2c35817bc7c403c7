[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tilesmith"
version = "1.1.10"
description = "Blueprint and map file handling for a 2D tile, thing and polygon map editor"
requires-python = ">=3.10"
dependencies = []
keywords = ["tile", "map", "editor", "level", "blueprint", "json", "games"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tilesmith"]

[tool.pytest.ini_options]
addopts = "-ra"
