"""
Error types raised by vectorflow.

All errors derive from VectorFlowError so callers can catch the whole family
at once. Each concrete error also derives from the closest builtin so code
that only knows about ValueError or LookupError keeps working.

Routing exhaustion is deliberately absent: the path router recovers from it
by returning a direct segment.
"""


class VectorFlowError(Exception):
    """Base class for all vectorflow errors."""

    pass


class ConfigurationError(VectorFlowError, ValueError):
    """Raised when an element, box model, container or style is misconfigured."""

    pass


class GeometryError(VectorFlowError, ValueError):
    """Raised when a geometric operation has no defined result."""

    pass


class ElementLookupError(VectorFlowError, LookupError):
    """Raised when a child, column, cell, bar or node lookup fails."""

    pass
