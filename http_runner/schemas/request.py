"""
Pydantic schemas for request definitions.

Defines the schema of one entry of the definitions file, with HTTP
method normalization and body/form exclusivity validation.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


# HTTP methods supported by the runner
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]

SUPPORTED_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")

# Label used for definitions without a name
UNNAMED = "Unnamed"


class RequestSpec(BaseModel):
    """
    Schema for a single request definition.

    Unknown fields are ignored so newer definition files still load.
    ``body`` and ``form`` are mutually exclusive.
    """
    name: str | None = None
    url: str
    method: HttpMethod
    headers: dict[str, str] = {}
    params: dict[str, str] = {}
    body: Any | None = None
    form: dict[str, str] | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, value: Any) -> Any:
        """Accept methods case-insensitively."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("headers", "params", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value

    @model_validator(mode="after")
    def check_body_form_exclusive(self) -> "RequestSpec":
        if self.body is not None and self.form is not None:
            raise ValueError("Cannot use 'body' and 'form' fields simultaneously")
        return self

    @property
    def display_name(self) -> str:
        """Name shown in reports."""
        return self.name or UNNAMED
