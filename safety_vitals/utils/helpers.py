"""Shared parsing helpers for request payloads.

parse_date_input:  date or ISO / DD.MM.YYYY string → date (raises ValueError)
parse_org_filter:  "orgId" request value → org id or None ("all" means no filter)
parse_id_list:     JSON array of ids → list[str] (raises ValueError)
"""
from datetime import date, datetime


def parse_date_input(value):
    """Parse a date string, raising ValueError on bad input.

    Supports: YYYY-MM-DD, YYYY-MM-DDTHH:MM:SS, DD.MM.YYYY, date objects.
    Empty input returns None.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%d.%m.%Y").date()
    except ValueError as exc:
        raise ValueError(
            "Invalid date format. Use YYYY-MM-DD or DD.MM.YYYY."
        ) from exc


def parse_org_filter(value):
    """Return the org id to filter by, or None for "no filter".

    The dashboard sends ``orgId: "all"`` when a platform admin looks at every
    organization at once.
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value or value == "all":
        return None
    return value


def parse_id_list(value) -> list[str]:
    """Validate a JSON array of identifiers.

    Raises ValueError when the value is not a list of strings/ints.
    """
    if not isinstance(value, list):
        raise ValueError("Expected a list of identifiers")
    ids = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (str, int)):
            raise ValueError("Identifiers must be strings")
        ids.append(str(item))
    return ids
