"""Custom exception hierarchy for cocometa.

All library-specific exceptions inherit from ``CocometaError`` so consumers
can catch ``except CocometaError`` to handle any cocometa failure.
"""


class CocometaError(Exception):
    """Base exception for all cocometa errors."""


class DecodeError(CocometaError):
    """Raised when a COCO annotation document cannot be decoded.

    ``path`` points at the offending JSON value, e.g. ``annotations[3].bbox``.
    An empty path means the document root.
    """

    def __init__(self, message: str, path: str = "") -> None:
        """Initialize with a message and the JSON path it refers to."""
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class MalformedDocumentError(DecodeError):
    """Raised for invalid JSON or a document of the wrong shape."""


class MalformedBoundingBoxError(DecodeError):
    """Raised when a ``bbox`` value is not an array of exactly 4 numbers."""


class TypeMismatchError(DecodeError):
    """Raised when a field holds a JSON value of the wrong type."""


class ReferenceLookupError(CocometaError, LookupError):
    """Raised when an id cannot be found in a metadata index."""

    def __init__(self, kind: str, entity_id: int) -> None:
        """Initialize with the entity kind and the missing id."""
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"No {kind} with id={entity_id}")
