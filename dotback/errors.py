"""Errors raised by the level configuration core."""


class LevelConfigError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LevelConfigError):
    """Malformed payload or level number. Raised before anything is written."""

    status_code = 400


class NotFoundError(LevelConfigError):
    status_code = 404


class StorageError(LevelConfigError):
    """The database refused or failed the write. The stored record is unchanged."""

    status_code = 500
