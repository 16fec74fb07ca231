"""Shared exception classes for arenapack."""


class ArenapackError(Exception):
    """Base exception for arenapack errors."""


class ConfigNotFoundError(ArenapackError):
    """Raised when arenapack.toml is not found."""


class ConfigParseError(ArenapackError):
    """Raised when arenapack.toml cannot be parsed."""


class ConfigValidationError(ArenapackError):
    """Raised when arenapack.toml contains invalid configuration."""


class ArenaConfigNotFoundError(ArenapackError):
    """Raised when the arena config record doesn't exist."""


class ArchiveExtractionError(ArenapackError):
    """Raised when an artifact cannot be decompressed or unpacked."""


class ContentUnavailableError(ArenapackError):
    """Raised when a bundle has no content to read from."""


class NoSourceError(ContentUnavailableError):
    """Raised when the arena config declares no source."""


class SourceNotFoundError(ContentUnavailableError):
    """Raised when the referenced arena source doesn't exist."""


class NoContentError(ContentUnavailableError):
    """Raised when every content location came back empty."""


class BundleFileNotFoundError(ArenapackError):
    """Raised when a path is not part of the bundle."""
