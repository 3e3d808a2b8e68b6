"""
Request parsing helpers shared by the API blueprints
"""

from flask import current_app, request

from app.buisness.core.errors import InvalidInputError

MAX_PAGE_SIZE = 100


def json_body():
    """The request's JSON object, or an empty dict when the body is absent"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def page_args():
    """
    Read ?page= and ?limit= from the query string.

    Returns:
        tuple: (page, limit) with page >= 1 and 1 <= limit <= MAX_PAGE_SIZE
    """
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', current_app.config.get('DEFAULT_PAGE_SIZE', 10), type=int)
    return max(page, 1), min(max(limit, 1), MAX_PAGE_SIZE)


def paginated(pagination, key, total_key, items):
    """List wrapper used by paginated endpoints"""
    return {
        key: items,
        'total_pages': pagination.pages,
        'current_page': pagination.page,
        total_key: pagination.total,
    }
