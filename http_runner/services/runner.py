"""
Run orchestration service.

Executes request definitions one at a time, strictly in input order:
each definition is resolved against the run environment, dispatched, and
its outcome recorded before the next one starts. A failing request never
stops the run.
"""

import logging
from typing import Callable

import httpx

from ..config import ExecutionContext
from ..exceptions import SubstitutionError
from ..schemas.request import RequestSpec
from ..schemas.result import RequestOutcome, RunSummary
from .aggregator import ResultAggregator
from .http_executor import execute_request
from .variable_substitution import resolve_request


logger = logging.getLogger(__name__)

# Called with (1-based index, total, outcome) after every request
OutcomeCallback = Callable[[int, int, RequestOutcome], None]


async def run_request(
    request: RequestSpec,
    context: ExecutionContext,
    client: httpx.AsyncClient
) -> RequestOutcome:
    """
    Resolve and execute a single definition.

    Args:
        request: Definition as parsed from the file
        context: Run configuration
        client: HTTP client shared by the run

    Returns:
        The outcome; strict-mode substitution failures become failed outcomes
    """
    try:
        resolved, warnings = resolve_request(
            request, context.environment, strict=context.strict_variables
        )
    except SubstitutionError as e:
        logger.warning("%s: %s", request.display_name, e.detail)
        return RequestOutcome.failed(
            name=request.display_name,
            method=request.method,
            url=request.url,
            error_message=e.detail,
            error_type="unresolved_variable",
        )

    return await execute_request(
        resolved, client, timeout=context.timeout, warnings=warnings
    )


async def run_requests(
    requests: list[RequestSpec],
    context: ExecutionContext,
    transport: httpx.AsyncBaseTransport | None = None,
    on_outcome: OutcomeCallback | None = None
) -> RunSummary:
    """
    Execute all definitions sequentially and summarize the outcomes.

    Args:
        requests: Parsed definitions, in file order
        context: Run configuration
        transport: Optional httpx transport (e.g. to target an ASGI app)
        on_outcome: Optional callback invoked after each request completes

    Returns:
        RunSummary with one outcome per definition, in input order
    """
    aggregator = ResultAggregator()
    total = len(requests)

    async with httpx.AsyncClient(
        timeout=context.timeout,
        follow_redirects=context.follow_redirects,
        transport=transport,
    ) as client:
        for index, request in enumerate(requests, start=1):
            outcome = await run_request(request, context, client)
            aggregator.record(outcome)
            if on_outcome is not None:
                on_outcome(index, total, outcome)

    summary = aggregator.summary()
    logger.info(
        "Run finished: %d total, %d succeeded, %d failed (%.1f%%)",
        summary.total, summary.succeeded, summary.failed, summary.success_rate
    )
    return summary
