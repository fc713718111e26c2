"""Errors raised by the notification subsystem."""


class StorageError(Exception):
    """A repository could not read or write the database."""


class UnknownEventType(ValueError):
    """No notification kind is registered for the requested event type."""
