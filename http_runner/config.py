"""
Configuration for the HTTP request runner.

Builds the immutable ExecutionContext for a run. Variables come from an
optional .env file and from the process environment; on a key collision
the process environment wins.
"""

import logging
import os
from pathlib import Path
from typing import Literal, Mapping

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field


logger = logging.getLogger(__name__)

# Default per-request timeout in seconds
DEFAULT_TIMEOUT = 30.0

# .env file looked up in the working directory when none is given
DEFAULT_ENV_FILE = ".env"

OutputFormat = Literal["pretty", "json"]


class ExecutionContext(BaseModel):
    """
    Immutable configuration for one run.

    Built once at startup and passed explicitly to every component that
    needs it; nothing reads the process environment afterwards.
    """
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    output_format: OutputFormat = "pretty"
    environment: dict[str, str] = {}
    strict_variables: bool = False
    follow_redirects: bool = False

    model_config = ConfigDict(frozen=True)


def find_env_file(env_file: str | Path | None = None) -> Path | None:
    """
    Resolve the .env file to load.

    An explicit path is returned as is; otherwise ``./.env`` is used if it exists.
    """
    if env_file is not None:
        return Path(env_file)

    default = Path.cwd() / DEFAULT_ENV_FILE
    return default if default.is_file() else None


def load_environment(
    env_file: str | Path | None = None,
    process_env: Mapping[str, str] | None = None
) -> dict[str, str]:
    """
    Merge .env file values and process environment variables.

    Args:
        env_file: Path of a .env-format file, or None to skip file loading
        process_env: Process environment, defaults to ``os.environ``

    Returns:
        Merged mapping; process environment values take precedence
    """
    if process_env is None:
        process_env = os.environ

    variables: dict[str, str] = {}

    if env_file is not None:
        # Keys declared without a value ("KEY" alone) come back as None
        file_values = dotenv_values(env_file)
        variables.update({key: value for key, value in file_values.items() if value is not None})
        logger.debug("Loaded %d variables from %s", len(variables), env_file)

    variables.update(process_env)
    return variables


def build_context(
    timeout: float = DEFAULT_TIMEOUT,
    output_format: OutputFormat = "pretty",
    env_file: str | Path | None = None,
    process_env: Mapping[str, str] | None = None,
    strict_variables: bool = False,
    follow_redirects: bool = False
) -> ExecutionContext:
    """
    Create the execution context for one run.

    Args:
        timeout: Per-request timeout in seconds
        output_format: "pretty" or "json"
        env_file: Optional .env file
        process_env: Process environment, defaults to ``os.environ``
        strict_variables: Fail requests that reference undefined variables
        follow_redirects: Follow HTTP redirects instead of reporting 3xx

    Returns:
        Frozen ExecutionContext
    """
    return ExecutionContext(
        timeout=timeout,
        output_format=output_format,
        environment=load_environment(env_file, process_env),
        strict_variables=strict_variables,
        follow_redirects=follow_redirects,
    )
