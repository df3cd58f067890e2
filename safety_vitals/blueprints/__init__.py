"""
Safety Vitals
Blueprint registry.
"""

from flask import request


def json_body() -> dict:
    """Return the request's JSON object body, or {} when absent or not an object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
