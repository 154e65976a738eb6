class GeoAssignmentError(Exception):
    """Base geo assignment exception."""


class InvalidInputError(GeoAssignmentError, ValueError):
    """Raised when coordinates, agency type or tuning parameters are out of range."""


class MalformedGeometryError(GeoAssignmentError):
    """Raised when a boundary payload is neither a ring nor a list of rings."""
