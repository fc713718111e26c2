"""Standard response envelope for the admin API."""

from typing import Any, Optional, Sequence


def paginated_response(
    items: Sequence[Any],
    total: int,
    limit: int,
    offset: int,
    **meta: Any,
) -> dict:
    return {
        "data": items,
        "meta": {
            "total": total,
            "limit": limit,
            "offset": offset,
            **meta,
        },
    }


def single_response(item: Any, meta: Optional[dict] = None) -> dict:
    if meta is None:
        return {"data": item}
    return {"data": item, "meta": meta}
