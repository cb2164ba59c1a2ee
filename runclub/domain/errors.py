"""Error taxonomy for the persistence layer and its callers."""

from __future__ import annotations


class PersistenceError(Exception):
    """Base class for repository/store failures."""


class NotFoundError(PersistenceError):
    def __init__(self, collection: str, record_id: int):
        super().__init__(f"{collection[:-1].capitalize()} with id {record_id} not found")
        self.collection = collection
        self.record_id = record_id


class DuplicateEmailError(PersistenceError):
    def __init__(self, email: str):
        super().__init__("An application with this email address already exists")
        self.email = email


class StorageUnavailableError(PersistenceError):
    """The underlying disk, network or database call failed."""


class MalformedDataError(PersistenceError):
    """Stored text could not be decoded. Never escapes a record store."""


class ValidationError(Exception):
    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])
