"""
Pydantic schemas for execution results.

A RequestOutcome is either completed (an HTTP response was received, with
any status code) or failed (no response: timeout, transport error, or an
unresolved variable in strict mode). Exactly one of ``status_code`` and
``error_message`` is set; the constructors below are the only intended
way to build an outcome.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, computed_field, model_validator


ErrorType = Literal["timeout", "network_error", "invalid_url", "unresolved_variable", "unknown"]


def is_success(status_code: int) -> bool:
    """Only 2xx responses count as success."""
    return 200 <= status_code <= 299


class RequestOutcome(BaseModel):
    """
    Schema for the result of one executed request definition.

    Contains the resolved request identity, the classification, timing
    information, the captured response body and any warnings from
    variable substitution.
    """
    name: str
    method: str
    url: str
    success: bool
    status_code: int | None = None
    status_text: str | None = None
    elapsed_ms: float = 0.0
    response_body: str | None = None
    response_json: Any | None = None
    error_message: str | None = None
    error_type: ErrorType | None = None
    warnings: list[str] = []

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_completed_or_failed(self) -> "RequestOutcome":
        if (self.status_code is None) == (self.error_message is None):
            raise ValueError("Exactly one of status_code and error_message must be set")
        if self.status_code is not None and self.success != is_success(self.status_code):
            raise ValueError(f"success does not match status code {self.status_code}")
        if self.error_message is not None and self.success:
            raise ValueError("A failed outcome cannot be successful")
        return self

    @classmethod
    def completed(
        cls,
        name: str,
        method: str,
        url: str,
        status_code: int,
        elapsed_ms: float,
        status_text: str | None = None,
        response_body: str | None = None,
        response_json: Any | None = None,
        warnings: list[str] | None = None,
    ) -> "RequestOutcome":
        """Build the outcome of a request that received an HTTP response."""
        return cls(
            name=name,
            method=method,
            url=url,
            success=is_success(status_code),
            status_code=status_code,
            status_text=status_text,
            elapsed_ms=elapsed_ms,
            response_body=response_body,
            response_json=response_json,
            warnings=warnings or [],
        )

    @classmethod
    def failed(
        cls,
        name: str,
        method: str,
        url: str,
        error_message: str,
        error_type: ErrorType = "unknown",
        elapsed_ms: float = 0.0,
        warnings: list[str] | None = None,
    ) -> "RequestOutcome":
        """Build the outcome of a request that did not receive a response."""
        return cls(
            name=name,
            method=method,
            url=url,
            success=False,
            elapsed_ms=elapsed_ms,
            error_message=error_message,
            error_type=error_type,
            warnings=warnings or [],
        )


class RunSummary(BaseModel):
    """Schema for the aggregate of all outcomes of a run, in input order."""
    total: int
    succeeded: int
    failed: int
    success_rate: float
    outcomes: list[RequestOutcome] = []

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def failed_names(self) -> list[str]:
        return [outcome.name for outcome in self.outcomes if not outcome.success]
