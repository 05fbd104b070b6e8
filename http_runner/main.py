"""
HTTP Request Runner - command line entry point

Runs the HTTP requests declared in a JSON file and reports the results
either as a colored report or as a JSON document.

Exit codes:
    0  every request succeeded (or the file declares no requests)
    1  at least one request did not succeed
    2  the definitions file could not be read or parsed
"""

import asyncio
import logging
import sys

import click
from rich.console import Console

from . import __version__
from .config import DEFAULT_TIMEOUT, build_context, find_env_file
from .exceptions import DefinitionError
from .services.definition_parser import load_definitions
from .services.renderer import PrettyRenderer, render_json
from .services.runner import run_requests


EXIT_OK = 0
EXIT_REQUEST_FAILED = 1
EXIT_DEFINITION_ERROR = 2

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    # stdout is reserved for the report
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.command(help="Run the HTTP requests declared in a JSON file.")
@click.version_option(__version__, prog_name="http-runner")
@click.option(
    "-f", "--file", "file_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="JSON file with the request definitions.",
)
@click.option(
    "-t", "--timeout",
    default=DEFAULT_TIMEOUT,
    show_default=True,
    type=click.FloatRange(min=0, min_open=True),
    help="Per-request timeout in seconds.",
)
@click.option(
    "-o", "--output",
    default="pretty",
    show_default=True,
    type=click.Choice(["pretty", "json"]),
    help="Output format.",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Variables file in .env format (defaults to ./.env when present).",
)
@click.option(
    "--strict-variables",
    is_flag=True,
    help="Fail requests that reference undefined {{variables}} instead of sending them.",
)
@click.option(
    "--follow-redirects",
    is_flag=True,
    help="Follow HTTP redirects instead of reporting 3xx responses.",
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level for diagnostics written to stderr.",
)
def cli(file_path, timeout, output, env_file, strict_variables, follow_redirects, log_level):
    configure_logging(log_level)

    try:
        definitions = load_definitions(file_path)
    except DefinitionError as e:
        logger.debug("Definition error: %s", e.detail)
        click.echo(f"Error: {e.detail}", err=True)
        sys.exit(EXIT_DEFINITION_ERROR)

    context = build_context(
        timeout=timeout,
        output_format=output,
        env_file=find_env_file(env_file),
        strict_variables=strict_variables,
        follow_redirects=follow_redirects,
    )

    if context.output_format == "json":
        summary = asyncio.run(run_requests(definitions, context))
        click.echo(render_json(summary))
    else:
        renderer = PrettyRenderer(Console())
        renderer.banner(context.timeout)
        summary = asyncio.run(
            run_requests(definitions, context, on_outcome=renderer.outcome)
        )
        renderer.summary(summary)

    sys.exit(EXIT_OK if summary.failed == 0 else EXIT_REQUEST_FAILED)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
