from datetime import datetime, timezone


def utc_now():
    return datetime.now(timezone.utc)


def utc_today():
    return utc_now().date()


def parse_timestamp(value):
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z'. Naive values are taken to be UTC. Raises ValueError
    for anything that is not a string holding a valid timestamp.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f'not a timestamp: {value!r}')
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(moment):
    """Render a datetime as UTC 'YYYY-MM-DDTHH:MM:SS.mmmZ'."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f'{moment.microsecond // 1000:03d}Z'


def utc_date_of(value):
    """UTC calendar date of a timestamp string or datetime."""
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc).date()
    return parse_timestamp(value).date()
