"""Domain errors raised by services and translated by the endpoints."""


class InvalidGeolocationError(ValueError):
    """Latitude, longitude or radius could not be used for a geospatial search."""


class InvalidIdentifierError(ValueError):
    """An event identifier is not a valid document id."""


class DatabaseNotConfiguredError(RuntimeError):
    """No connection string is configured for the data store."""


class ContentGenerationError(RuntimeError):
    """The content generation service returned no usable content."""
