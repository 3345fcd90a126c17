class OneLineError(Exception):
    """Base class for failures raised by the ordering strategies."""


class InvalidInput(OneLineError, ValueError):
    pass


class GraphTooSparse(OneLineError, RuntimeError):
    """No usable seed vertex was found within the retry budget.

    Recoverable by sampling denser points or raising the neighbor distance.
    """


class NoTriangleFound(GraphTooSparse):
    pass


class EmptyPool(OneLineError, IndexError):
    pass
