from werkzeug.exceptions import InternalServerError


class StorageError(InternalServerError):
    """Raised by a key-value store when a read or write fails."""

    description = 'Storage operation failed'
