"""ISO-8601 date input shared by the body serializers and the list filters."""

from django.utils.dateparse import parse_datetime


def calendar_date(value):
    """
    Return the calendar date of an ISO-8601 timestamp string, or ``None``.

    ``"2026-10-20T00:00:00.000Z"`` gives ``date(2026, 10, 20)``; the date is
    taken as written, without converting the offset.  Anything that is not
    a well-formed timestamp returns ``None`` and is left to the ordinary
    date parsing.
    """
    if not isinstance(value, str):
        return None
    try:
        parsed = parse_datetime(value.strip())
    except ValueError:
        return None
    return parsed.date() if parsed is not None else None
