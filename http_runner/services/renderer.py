"""
Output rendering for run results.

Two formats are supported: ``pretty`` prints a colored, human-oriented
report with rich (streamed one request at a time), ``json`` writes the
RunSummary as a single JSON document.
"""

import json

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..schemas.result import RequestOutcome, RunSummary


# Response bodies longer than this are truncated in pretty output
MAX_BODY_CHARS = 500

RULE_WIDTH = 60


def render_json(summary: RunSummary) -> str:
    """Serialize the run summary as an indented JSON document."""
    return summary.model_dump_json(indent=2)


def format_body(outcome: RequestOutcome) -> str | None:
    """Pretty-print a JSON body, otherwise return the raw text."""
    if outcome.response_json is not None:
        return json.dumps(outcome.response_json, indent=2, ensure_ascii=False)
    return outcome.response_body


def status_line(outcome: RequestOutcome) -> tuple[str, str]:
    """Return (text, style) of the status line of a completed outcome."""
    code = outcome.status_code
    text = f"Status: {code} {outcome.status_text or ''}".rstrip()
    if outcome.success:
        return f"✅ {text}", "green"
    if 400 <= code < 500:
        return f"⚠️  {text}", "yellow"
    if code >= 500:
        return f"❌ {text}", "red"
    return f"ℹ️  {text}", "blue"


class PrettyRenderer:
    """Human-oriented terminal report."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def banner(self, timeout: float) -> None:
        rule = "=" * RULE_WIDTH
        self.console.print(rule, style="bright_blue")
        self.console.print(
            f"HTTP Request Test Started (Timeout: {timeout:g}s)", style="bold bright_blue"
        )
        self.console.print(rule, style="bright_blue")

    def outcome(self, index: int, total: int, outcome: RequestOutcome) -> None:
        console = self.console
        console.print()
        console.print(
            f"[bright_cyan]\\[{index}/{total}][/] [bold bright_white]{escape(outcome.name)}[/]"
        )
        console.print(
            f"[bright_black]Method:[/] [bright_yellow]{outcome.method}[/] "
            f"[bright_black]{escape(outcome.url)}[/]"
        )

        if outcome.status_code is not None:
            text, style = status_line(outcome)
            console.print(escape(text), style=style)

        console.print(f"[bright_black]Response time:[/] {outcome.elapsed_ms / 1000:.2f}s")

        for warning in outcome.warnings:
            console.print(f"[yellow]Warning:[/] {escape(warning)}")

        if outcome.error_message is not None:
            console.print(
                f"[bold red]❌ Error:[/] [bright_black]{escape(outcome.error_message)}[/]"
            )

        console.print()
        console.print("Response body:", style="bold bright_white")
        body = format_body(outcome)
        if body:
            if len(body) > MAX_BODY_CHARS:
                console.print(escape(body[:MAX_BODY_CHARS]), style="bright_black")
                console.print(
                    f"... ({len(body) - MAX_BODY_CHARS} characters truncated)",
                    style="italic bright_black",
                )
            else:
                console.print(escape(body), style="bright_black")
        else:
            console.print("(empty)", style="bright_black")
        console.print("-" * RULE_WIDTH, style="bright_black")

    def summary(self, summary: RunSummary) -> None:
        table = Table(box=box.SQUARE, min_width=30)
        table.add_column("Test Summary", justify="left")
        table.add_row(f"Total: {summary.total}")
        table.add_row(f"[green]Success: {summary.succeeded}[/]")
        table.add_row(f"[red]Failed: {summary.failed}[/]")
        table.add_row(f"Success rate: {summary.success_rate:.1f}%")

        if summary.failed_names:
            table.add_row("")
            table.add_row("Failed Requests:")
            for name in summary.failed_names:
                table.add_row(f"  - {escape(name)}")

        self.console.print()
        self.console.print(table)
