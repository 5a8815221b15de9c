"""Error types for run configuration."""


class ConfigurationError(Exception):
    """Missing or invalid run configuration.

    Raised before any filesystem or network I/O takes place.

    Attributes:
        field: Name of the offending setting, when known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
