"""Limit/offset pagination shared by every list endpoint.

Response envelope::

    {"total": 42, "limit": 10, "offset": 0, "hasMore": true, "data": [...]}
"""

from __future__ import annotations

from collections import OrderedDict

from django.conf import settings
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.response import Response


class StandardResultsSetPagination(LimitOffsetPagination):
    default_limit = getattr(settings, "DEFAULT_PAGE_LIMIT", 10)
    max_limit = getattr(settings, "MAX_PAGE_LIMIT", 100)

    def get_paginated_response(self, data) -> Response:
        return Response(
            OrderedDict(
                [
                    ("total", self.count),
                    ("limit", self.limit),
                    ("offset", self.offset),
                    ("hasMore", self.offset + self.limit < self.count),
                    ("data", data),
                ]
            )
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "required": ["total", "limit", "offset", "data"],
            "properties": {
                "total": {"type": "integer", "example": 42},
                "limit": {"type": "integer", "example": self.default_limit},
                "offset": {"type": "integer", "example": 0},
                "hasMore": {"type": "boolean"},
                "data": schema,
            },
        }
