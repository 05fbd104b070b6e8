"""
HTTP Request Runner

Runs HTTP requests declared in a JSON file, with {{variable}} substitution
from the environment, and reports pass/fail results.
"""

__version__ = "1.0.0"
