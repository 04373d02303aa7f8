from dotenv import load_dotenv
from fastapi import Query
from sqlalchemy.orm import Query as SAQuery
from api.db.database import MAX_ID
import math, os

load_dotenv(".env")

DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "15"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
# page * size must stay a valid offset for the store
MAX_PAGE = MAX_ID // MAX_PAGE_SIZE


class PageParams:
    """Zero-based page index and page size, bound from the query string."""

    def __init__(
        self,
        page: int = Query(0, ge=0, le=MAX_PAGE),
        size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    ):
        self.page = page
        self.size = size


def paginate(query: SAQuery, page: int, size: int) -> dict:
    # count before ordering/limits so the count query stays simple
    total = query.order_by(None).count()
    items = query.offset(page * size).limit(size).all()
    return {
        "content": items,
        "page": page,
        "size": size,
        "total_elements": total,
        "total_pages": math.ceil(total / size) if size else 0,
    }


def empty_page(page: int, size: int) -> dict:
    return {"content": [], "page": page, "size": size, "total_elements": 0, "total_pages": 0}
