"""
Custom exception classes for the HTTP request runner.

Definition errors abort a run before any network activity. Substitution
errors are recovered per request by the runner. Transport failures never
surface as exceptions; the dispatcher records them on the outcome.
"""

from typing import Any, Iterable


class RunnerError(Exception):
    """Base exception for runner errors."""

    def __init__(self, detail: str, error_code: str | None = None):
        self.detail = detail
        self.error_code = error_code
        super().__init__(detail)


class DefinitionError(RunnerError):
    """Exception raised when the request definitions cannot be loaded or parsed."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, error_code="DEFINITION_ERROR")


class SubstitutionError(RunnerError):
    """Exception raised when placeholder substitution cannot be completed."""

    def __init__(self, detail: str, error_code: str = "SUBSTITUTION_ERROR"):
        super().__init__(detail=detail, error_code=error_code)


class UnresolvedVariableError(SubstitutionError):
    """Exception raised in strict mode when placeholders have no value."""

    def __init__(self, variables: list[str]):
        self.variables = variables
        names = ", ".join("{{" + name + "}}" for name in variables)
        super().__init__(
            detail=f"Unresolved variables: {names}",
            error_code="UNRESOLVED_VARIABLE"
        )


def format_validation_errors(errors: Iterable[dict[str, Any]], prefix: str | None = None) -> str:
    """
    Format pydantic validation errors into a readable message.

    Args:
        errors: Error dicts as returned by ``ValidationError.errors()``
        prefix: Optional location prepended to every error (e.g. "entry 2")

    Returns:
        Messages of the form ``loc -> loc: msg`` joined by "; "
    """
    error_messages = []
    for error in errors:
        parts = [str(loc) for loc in error["loc"]]
        if prefix:
            parts.insert(0, prefix)
        msg = error["msg"]
        if parts:
            error_messages.append(f"{' -> '.join(parts)}: {msg}")
        else:
            error_messages.append(msg)

    return "; ".join(error_messages) if error_messages else "Validation error"
