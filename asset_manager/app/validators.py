"""Request and input validation for the asset manager."""
from datetime import date

from asset_manager.app.errors import InvalidArgument
from asset_manager.app.queries import PageRequest

NAME_MAX_LEN = 100


def require_object(payload):
    """Return the decoded JSON body as a dict; a missing body is treated as empty."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidArgument('Request body must be a JSON object')
    return payload


def require_text(payload, key, max_len=NAME_MAX_LEN):
    """Return a stripped, non-empty string field from ``payload``. Raises InvalidArgument if missing."""
    value = payload.get(key)
    if value is None or not str(value).strip():
        raise InvalidArgument(f'{key} is required')
    value = str(value).strip()
    if len(value) > max_len:
        raise InvalidArgument(f'{key} must be at most {max_len} characters')
    return value


def parse_date(value, key='date'):
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidArgument(f'{key} is required')
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidArgument(f'{key} must be an ISO date (YYYY-MM-DD), got {value!r}')


def parse_int(value, key, default):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f'{key} must be an integer, got {value!r}')


def parse_list(args, key):
    """Collect a list parameter given either repeated (?k=a&k=b) or comma-separated (?k=a,b)."""
    values = []
    for raw in args.getlist(key):
        values.extend(v.strip() for v in raw.split(',') if v.strip())
    return values


def parse_page_request(args, default_size, page_key='page', size_key='size'):
    page = parse_int(args.get(page_key), page_key, 1)
    size = parse_int(args.get(size_key), size_key, default_size)
    return PageRequest(page=page, size=size)
