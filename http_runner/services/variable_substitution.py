"""
Variable substitution service for replacing {{variable}} placeholders.

This service handles extraction and substitution of variable placeholders
in request definitions (URL, headers, query params, form fields and every
string inside a JSON body). Substitution never mutates its input.
"""

import logging
import re
from typing import Any, Tuple, List

from ..exceptions import UnresolvedVariableError
from ..schemas.request import RequestSpec


logger = logging.getLogger(__name__)

# Pattern to match {{variable_name}} placeholders
VARIABLE_PATTERN = re.compile(r'\{\{([^}]+)\}\}')


def extract_variables(template: str) -> List[str]:
    """
    Extract all variable names from a template string.

    Args:
        template: String containing {{variable}} placeholders

    Returns:
        List of variable names found in the template

    Example:
        >>> extract_variables("Hello {{name}}, your id is {{ id }}")
        ['name', 'id']
    """
    if not template:
        return []

    return [name.strip() for name in VARIABLE_PATTERN.findall(template)]


def substitute(template: str, variables: dict[str, str]) -> Tuple[str, List[str]]:
    """
    Replace variable placeholders in a template with their values.

    Placeholders without a value are kept as they are.

    Args:
        template: String containing {{variable}} placeholders
        variables: Dictionary mapping variable names to their values

    Returns:
        Tuple of (substituted string, list of unmatched variable names)

    Example:
        >>> substitute("Hello {{name}}", {"name": "World"})
        ('Hello World', [])
        >>> substitute("Hello {{name}}", {})
        ('Hello {{name}}', ['name'])
    """
    if not template:
        return template, []

    unmatched: List[str] = []

    def replace_match(match: re.Match) -> str:
        var_name = match.group(1).strip()
        if var_name in variables:
            return variables[var_name]
        else:
            unmatched.append(var_name)
            return match.group(0)  # Keep original placeholder

    result = VARIABLE_PATTERN.sub(replace_match, template)
    return result, unmatched


def substitute_dict(data: dict[str, str], variables: dict[str, str]) -> Tuple[dict[str, str], List[str]]:
    """
    Replace variable placeholders in all values of a dictionary.

    Keys are left as they are and their order is preserved.

    Args:
        data: Dictionary with string values that may contain placeholders
        variables: Dictionary mapping variable names to their values

    Returns:
        Tuple of (substituted dictionary, list of all unmatched variable names)
    """
    if not data:
        return data, []

    result = {}
    all_unmatched: List[str] = []

    for key, value in data.items():
        substituted_value, unmatched = substitute(value, variables)
        result[key] = substituted_value
        all_unmatched.extend(unmatched)

    return result, all_unmatched


def substitute_value(value: Any, variables: dict[str, str]) -> Tuple[Any, List[str]]:
    """
    Replace variable placeholders in every string leaf of a JSON value.

    Objects and arrays are walked recursively and rebuilt; object keys,
    numbers, booleans and null are returned unchanged.

    Args:
        value: Any JSON-compatible value
        variables: Dictionary mapping variable names to their values

    Returns:
        Tuple of (new value, list of all unmatched variable names)
    """
    if isinstance(value, str):
        return substitute(value, variables)

    unmatched: List[str] = []

    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            result[key], item_unmatched = substitute_value(item, variables)
            unmatched.extend(item_unmatched)
        return result, unmatched

    if isinstance(value, list):
        items = []
        for item in value:
            new_item, item_unmatched = substitute_value(item, variables)
            items.append(new_item)
            unmatched.extend(item_unmatched)
        return items, unmatched

    return value, unmatched


def resolve_request(
    request: RequestSpec,
    variables: dict[str, str],
    strict: bool = False
) -> tuple[RequestSpec, list[str]]:
    """
    Apply variable substitution to all parts of a request definition.

    Args:
        request: The definition to process; it is not modified
        variables: Variable name to value mapping
        strict: Raise instead of warning when a placeholder has no value

    Returns:
        Tuple of (resolved copy of the definition, list of warning messages)

    Raises:
        UnresolvedVariableError: In strict mode, if any placeholder has no value
    """
    warnings: list[str] = []
    missing: list[str] = []

    def record(field: str, unmatched: list[str]) -> None:
        for name in unmatched:
            warnings.append(f"Undefined variable in {field}: {{{{{name}}}}}")
            if name not in missing:
                missing.append(name)

    # Substitute URL
    url, url_unmatched = substitute(request.url, variables)
    record("URL", url_unmatched)

    # Substitute headers
    headers, headers_unmatched = substitute_dict(request.headers, variables)
    record("headers", headers_unmatched)

    # Substitute query params
    params, params_unmatched = substitute_dict(request.params, variables)
    record("query params", params_unmatched)

    # Substitute form fields
    form = request.form
    if form is not None:
        form, form_unmatched = substitute_dict(form, variables)
        record("form", form_unmatched)

    # Substitute body
    body = request.body
    if body is not None:
        body, body_unmatched = substitute_value(body, variables)
        record("body", body_unmatched)

    if missing:
        if strict:
            raise UnresolvedVariableError(missing)
        for warning in warnings:
            logger.warning("%s: %s", request.display_name, warning)

    resolved = request.model_copy(
        update={
            "url": url,
            "headers": headers,
            "params": params,
            "form": form,
            "body": body,
        }
    )

    return resolved, warnings
