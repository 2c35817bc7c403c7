"""Blueprint and map file handling for a 2D tile, thing and polygon map editor."""

__version__ = "1.1.10"