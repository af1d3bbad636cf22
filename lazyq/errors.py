class EmptySequenceError(ValueError):
    """raised when a reduction has no seed and the sequence has no elements."""


class HierarchyRequiredError(TypeError):
    """raised when a hierarchy operator is used on a query with no hierarchy provider."""
