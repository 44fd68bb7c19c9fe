from dataclasses import dataclass


@dataclass(frozen=True)
class ErrorVal:
    """Describes an MCL runtime error.

    `name` is the error category (NameError, ArityError, TypeError,
    ZeroDivisionError, IndexError, CallError, ConditionError or
    RecursionError) and `message` is the human-readable description.
    """
    name: str
    message: str

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r})"


class MclError(Exception):
    """Exception type used to propagate MCL runtime errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(f"{err.name}: {err.message}")
        self.err = err

    @property
    def name(self) -> str:
        return self.err.name

    @property
    def message(self) -> str:
        return self.err.message
