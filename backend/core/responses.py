"""Success envelope shared by every /warehouse route.

    {"code": 200, "data": ..., "message": "Success"}

Paged data is ``{"items": [...], "pagination": {...}}``.
"""

import math
from typing import Any


def ok(data: Any, message: str = "Success", code: int = 200) -> dict:
    return {"code": code, "data": data, "message": message}


def paginated(items: list, total: int, page: int, limit: int) -> dict:
    return {
        "items": items,
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit) if limit else 0,
        },
    }
