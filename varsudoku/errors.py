class InvalidInputError(ValueError):
    """Raised when a puzzle matrix or puzzle text is malformed.

    Distinct from an unsolvable puzzle: a well-formed grid with no solution
    is reported through the solver result, never raised.
    """
