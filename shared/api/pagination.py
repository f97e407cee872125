"""Page/limit pagination wrapped in the response envelope."""

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination  # type: ignore

from .responses import success_response


class EnvelopePagination(PageNumberPagination):
    """``?page=<n>&limit=<m>``; page numbers start at 1."""

    page_query_param = "page"
    page_size_query_param = "limit"
    page_size = 10
    max_page_size = 100

    def get_pagination_meta(self) -> dict[str, int | bool | None]:
        page = self.page
        paginator = page.paginator
        current = page.number
        return {
            "currentPage": current,
            "totalPages": paginator.num_pages,
            "totalItems": paginator.count,
            "itemsPerPage": paginator.per_page,
            "hasNextPage": page.has_next(),
            "hasPrevPage": page.has_previous(),
            "nextPage": current + 1 if page.has_next() else None,
            "prevPage": current - 1 if page.has_previous() else None,
        }

    def get_paginated_response(self, data, message: str | None = None):  # type: ignore
        return success_response(
            {"items": data, "pagination": self.get_pagination_meta()},
            message=message,
        )

    def get_paginated_response_schema(self, schema):  # type: ignore
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "message": {"type": "string"},
                "statusCode": {"type": "integer"},
                "data": {
                    "type": "object",
                    "properties": {
                        "items": schema,
                        "pagination": {"type": "object"},
                    },
                },
            },
        }


def paginate(view, queryset, serializer_class, *, message: str | None = None, context=None):
    """Пагинация для APIView/@action, где нет стандартного list()."""

    paginator = EnvelopePagination()
    page = paginator.paginate_queryset(queryset, view.request, view=view)
    serializer = serializer_class(page, many=True, context=context or {"request": view.request})
    return paginator.get_paginated_response(serializer.data, message=message)
