"""
Errors raised by computer stores and the notification side-channel.

Stores never let library exceptions escape: anything coming from the file
system or the database is wrapped in a BackendError subclass with the original
exception chained as __cause__.
"""


class StoreError(Exception):
    """Base class for every error a store can raise."""


class MalformedError(StoreError):
    """A field constraint was violated by the caller's input."""


class NotFoundError(StoreError):
    """No computer matched the key."""


class NotUniqueError(StoreError):
    """More than one computer matched a key that must be unique."""


class AlreadyExistsError(StoreError):
    """An identifying attribute collides with an existing computer."""


class InvalidKeyKindError(StoreError):
    """The key kind exists but is not allowed for this operation."""


class UnknownKeyKindError(StoreError):
    """The key kind is not recognized at all."""


class BackendError(StoreError):
    """I/O failure in the underlying file or database."""


class StoreCreateError(BackendError):
    pass


class StoreOpenError(BackendError):
    pass


class StoreReadError(BackendError):
    pass


class StoreWriteError(BackendError):
    pass


class StoreCloseError(BackendError):
    pass


class UnknownStorageTypeError(StoreError):
    """Requested storage type has no backend."""


class NotificationError(Exception):
    """The over-assignment alert could not be delivered."""
