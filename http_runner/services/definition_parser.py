"""
Definition parsing service for loading request definitions.

The definitions file is a JSON array of request objects. Any problem with
the document is reported as a DefinitionError before a single request is
sent.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..exceptions import DefinitionError, format_validation_errors
from ..schemas.request import RequestSpec


logger = logging.getLogger(__name__)


def parse_definitions(raw: bytes | str) -> list[RequestSpec]:
    """
    Parse a JSON document into request definitions.

    Args:
        raw: UTF-8 encoded JSON document (bytes or already decoded text)

    Returns:
        Definitions in the order they appear in the document

    Raises:
        DefinitionError: If the document is not a JSON array of valid definitions
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DefinitionError(f"Definitions file is not valid UTF-8: {e}") from e

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DefinitionError(f"Invalid JSON: {e}") from e

    if not isinstance(document, list):
        raise DefinitionError(
            f"Top-level value must be an array of requests, got {_json_type(document)}"
        )

    definitions: list[RequestSpec] = []
    for index, entry in enumerate(document):
        if not isinstance(entry, dict):
            raise DefinitionError(f"entry {index}: must be an object, got {_json_type(entry)}")
        try:
            definitions.append(RequestSpec.model_validate(entry))
        except ValidationError as e:
            raise DefinitionError(
                format_validation_errors(e.errors(), prefix=f"entry {index}")
            ) from e

    logger.debug("Parsed %d request definitions", len(definitions))
    return definitions


def load_definitions(path: str | Path) -> list[RequestSpec]:
    """
    Read and parse a definitions file.

    Raises:
        DefinitionError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise DefinitionError(f"Cannot read definitions file {path}: {e.strerror or e}") from e

    return parse_definitions(raw)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    return "number"
