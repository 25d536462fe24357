"""
Pagination utility for API endpoints
"""
from flask import request, current_app
from typing import Any, Callable, Dict, Optional
from sqlalchemy.orm import Query


def paginate(query: Query, page: Optional[int] = None, per_page: Optional[int] = None) -> Dict[str, Any]:
    """
    Paginate a SQLAlchemy query

    Args:
        query: SQLAlchemy query object
        page: Page number (1-indexed), defaults to the `page` request arg
        per_page: Items per page, defaults to the `per_page` request arg

    Returns:
        Dict with the page's items and pagination metadata
    """
    default_per_page = current_app.config.get('DEFAULT_PER_PAGE', 20)
    max_per_page = current_app.config.get('MAX_PER_PAGE', 100)

    if page is None:
        page = request.args.get('page', 1, type=int)
    if per_page is None:
        per_page = request.args.get('per_page', default_per_page, type=int)

    per_page = max(1, min(per_page, max_per_page))
    page = max(page, 1)

    total = query.order_by(None).count()
    items = query.limit(per_page).offset((page - 1) * per_page).all()

    total_pages = (total + per_page - 1) // per_page  # Ceiling division
    has_next = page < total_pages
    has_prev = page > 1

    return {
        'items': items,
        'pagination': {
            'page': page,
            'per_page': per_page,
            'total': total,
            'total_pages': total_pages,
            'has_next': has_next,
            'has_prev': has_prev,
            'next_page': page + 1 if has_next else None,
            'prev_page': page - 1 if has_prev else None
        }
    }


def paginate_response(page: Dict[str, Any], serializer: Optional[Callable] = None, key: str = 'data') -> Dict[str, Any]:
    """
    Serialize a paginate() result

    Args:
        page: Result of paginate()
        serializer: Function to serialize each item (default: to_dict)
        key: Name of the list in the response body
    """
    if serializer is None:
        serializer = lambda x: x.to_dict()

    return {
        key: [serializer(item) for item in page['items']],
        'pagination': page['pagination']
    }
