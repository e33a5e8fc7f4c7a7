"""Exceptions raised while resolving and converting Candid values."""

from __future__ import annotations


class CandidError(ValueError):
    """Base class for all candid_forms errors.

    ``path`` locates the offending value inside the argument being built
    (``.field``, ``[2]``); it is empty for top-level failures.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.message = message
        self.path = path
        super().__init__(f"{message} at {path}" if path else message)


class ArgumentCountError(CandidError):
    """Number of supplied values does not match the number of argument types."""


class InvalidBooleanError(CandidError):
    pass


class InvalidFloatError(CandidError):
    pass


class InvalidIntegerError(CandidError):
    pass


class ExpectedSequenceError(CandidError):
    pass


class MissingFieldError(CandidError):
    pass


class RecordShapeError(CandidError):
    """Record input is neither a mapping nor a sequence of the right length."""


class CyclicAliasError(CandidError):
    """An alias expands, directly or indirectly, to itself."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        super().__init__(f"Cyclic type alias: {' -> '.join(chain)}")


class UnresolvedTypeError(CandidError):
    """A bare type name is neither a built-in nor a declared alias."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Type '{name}' not found")
