"""
Exceptions raised by the confusion matrix accumulator and its serializers.
"""

from collections.abc import Sequence


class InvalidConfigurationError(ValueError):
    """Raised when a confusion matrix is built from an unusable class set."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnknownClassError(KeyError):
    def __init__(self, name: str, known: Sequence[str]) -> None:
        self.name = name
        self.known = tuple(known)
        super().__init__(f"Unknown class name: {name!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the whole message
        return str(self.args[0])


class ClassIndexOutOfRangeError(IndexError):
    def __init__(self, index: int, n_classes: int) -> None:
        self.index = index
        self.n_classes = n_classes
        super().__init__(
            f"Class index {index} out of range [0, {n_classes})"
        )


class MatrixFormatError(ValueError):
    pass
