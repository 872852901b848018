# Marks "engine" as a package and re-exports MapEngine for convenient imports.

from .map_engine import Frame, MapEngine

__all__ = ["Frame", "MapEngine"]
