"""
API Base Classes - Response Envelope and Pagination

This module provides the pieces every recruiter endpoint shares:
- APIResponse: standard success envelope helpers
- build_pagination: the ``{current, pages, total, limit}`` block
- StandardPagination: DRF page-number pagination using that block

Successful responses are shaped as:
{
    "success": true,
    "data": {...} | [...],
    "message": str | null,
    "meta": {"timestamp": "ISO8601", ...}
}
"""

import math
from typing import Any, Dict

from django.utils import timezone

from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


# =============================================================================
# STANDARD RESPONSE HELPERS
# =============================================================================

class APIResponse:
    """
    Standardized API response format for consistent client handling.

    Error responses are produced by ``api.exceptions.recruiter_exception_handler``
    so views raise exceptions instead of building error bodies.
    """

    @staticmethod
    def success(
        data: Any = None,
        message: str = None,
        status_code: int = status.HTTP_200_OK,
        meta: Dict = None,
        headers: Dict = None,
    ) -> Response:
        """Create a successful response."""
        response_meta = {
            "timestamp": timezone.now().isoformat(),
            **(meta or {})
        }

        response_data = {
            "success": True,
            "data": data,
            "message": message,
            "meta": response_meta
        }
        return Response(response_data, status=status_code, headers=headers)

    @staticmethod
    def created(
        data: Any = None,
        message: str = "Resource created successfully",
        meta: Dict = None
    ) -> Response:
        """Create a 201 Created response."""
        return APIResponse.success(
            data=data,
            message=message,
            status_code=status.HTTP_201_CREATED,
            meta=meta
        )

    @staticmethod
    def updated(
        data: Any = None,
        message: str = "Resource updated successfully",
        meta: Dict = None
    ) -> Response:
        return APIResponse.success(
            data=data,
            message=message,
            status_code=status.HTTP_200_OK,
            meta=meta
        )


# =============================================================================
# PAGINATION
# =============================================================================

def build_pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    """Pagination block; ``pages`` is 0 when there are no results."""
    return {
        "current": page,
        "pages": math.ceil(total / limit) if limit else 0,
        "total": total,
        "limit": limit,
    }


class StandardPagination(PageNumberPagination):
    """
    Standard page-number based pagination with configurable page size.

    Query params:
    - page: Page number (1-indexed)
    - limit: Items per page (default: 10, max: 100)
    """
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_paginated_response(self, data):
        return APIResponse.success(
            data={
                "results": data,
                "pagination": build_pagination(
                    page=self.page.number,
                    limit=self.get_page_size(self.request),
                    total=self.page.paginator.count,
                ),
            },
        )
