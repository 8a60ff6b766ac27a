"""Offset pagination for the task list."""

import math


def page_info(total, page, limit):
    """Pagination metadata for ``total`` items viewed ``limit`` per page."""
    total_pages = math.ceil(total / limit)
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalTasks": total,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def paginate(queryset, page, limit):
    """
    Return ``(items, pagination)`` for one page of ``queryset``.

    Runs a COUNT and a LIMIT/OFFSET query; pages past the end are empty.
    """
    total = queryset.count()
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit])
    return items, page_info(total, page, limit)
