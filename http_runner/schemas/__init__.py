"""
Pydantic schemas package.

Exports all schemas for request definitions and execution results.
"""

from .request import (
    HttpMethod,
    SUPPORTED_METHODS,
    UNNAMED,
    RequestSpec,
)

from .result import (
    ErrorType,
    is_success,
    RequestOutcome,
    RunSummary,
)

__all__ = [
    # Request schemas
    "HttpMethod",
    "SUPPORTED_METHODS",
    "UNNAMED",
    "RequestSpec",
    # Result schemas
    "ErrorType",
    "is_success",
    "RequestOutcome",
    "RunSummary",
]
