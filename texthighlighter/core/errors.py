"""
Exceptions raised by the highlighter.
"""


class InvalidArgumentError(ValueError):
    """A public call was made with an argument that violates its precondition."""
