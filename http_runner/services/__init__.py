# Services package

from .variable_substitution import (
    extract_variables,
    substitute,
    substitute_dict,
    substitute_value,
    resolve_request,
)
from .definition_parser import parse_definitions, load_definitions
from .http_executor import execute_request
from .aggregator import ResultAggregator, summarize
from .runner import run_request, run_requests
from .renderer import PrettyRenderer, render_json

__all__ = [
    "extract_variables",
    "substitute",
    "substitute_dict",
    "substitute_value",
    "resolve_request",
    "parse_definitions",
    "load_definitions",
    "execute_request",
    "ResultAggregator",
    "summarize",
    "run_request",
    "run_requests",
    "PrettyRenderer",
    "render_json",
]
