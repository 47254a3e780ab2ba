"""Error taxonomy shared by every layer.

Routes never catch these; the handlers registered in ``animerate.main``
turn them into JSON responses.
"""
from typing import Optional


class AnimeRateError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AnimeRateError):
    """Malformed or out-of-range input. Raised before any write happens."""


class StorageError(AnimeRateError):
    """The rating store could not read or write its medium."""


class CatalogError(AnimeRateError):
    """The external anime catalog failed or answered with an unexpected payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
