class StorageError(RuntimeError):
    """A backing JSON document could not be written."""


class NotProtectedError(Exception):
    """The note has no password to verify against."""


class IdSpaceExhaustedError(RuntimeError):
    """No free short id was found within the retry budget."""
