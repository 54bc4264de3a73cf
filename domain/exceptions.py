"""
Domain exceptions.

Adapters translate transport failures into these types so the application layer
never sees raw ``requests`` exceptions.
"""


class EntryStoreError(Exception):
    """Base class for any failure talking to the remote entry store."""


class StoreTransportError(EntryStoreError):
    """The store could not be reached or answered with a non-success status."""


class RemoteStoreError(EntryStoreError):
    """The store answered but reported an error in the response body."""


class InvalidResponseError(EntryStoreError):
    """The store answered with a body that is not a JSON object."""


class EntriesUnavailableError(EntryStoreError):
    """Entries could not be loaded (as opposed to loading zero entries)."""


class InvalidTransitionError(Exception):
    """A workflow transition was requested from a state that does not allow it."""


class ConfigurationError(Exception):
    """Required configuration is missing or malformed."""
