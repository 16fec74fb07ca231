"""arenapack: resolve, classify and normalize arena content packs."""

__version__ = "0.1.0"
