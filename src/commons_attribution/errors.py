# ABOUTME: Exception taxonomy for asset construction, input validation and remote lookups
# ABOUTME: An undetermined licence is not an error and is represented by None instead


class AttributionError(Exception):
    """Base exception for attribution resolution errors."""

    pass


class InvalidConstruction(AttributionError):
    """Raised when an Asset is created without its required identity fields."""

    pass


class InvalidInput(AttributionError):
    """Raised when a value of the wrong shape is handed to a setter or value type."""

    pass


class LookupFailure(AttributionError):
    """Raised when fetching asset metadata or image information fails.

    Attributes:
        filename: The (prefixed) filename that was looked up
        size: Requested image width for image info lookups, None for metadata lookups
        status_code: HTTP status code if the remote service answered with an error
        transient: Whether a later attempt has a reasonable chance of succeeding
    """

    def __init__(
        self,
        message: str,
        filename: str,
        size: int | None = None,
        status_code: int | None = None,
        transient: bool = False,
    ):
        super().__init__(message)
        self.filename = filename
        self.size = size
        self.status_code = status_code
        self.transient = transient
