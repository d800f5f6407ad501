class OceanCacheError(Exception):
    """Base class for search engine errors."""


class EmptyInputError(OceanCacheError, ValueError):
    """
    Raised when an operation needs at least one point and got none
    (e.g. the centroid of an empty list). Indicates a caller bug.
    """


class GridTooLargeError(OceanCacheError, ValueError):
    """Raised when radius/cell size would produce more cells than allowed."""


class ProviderError(OceanCacheError):
    """A live environmental data provider could not answer."""
