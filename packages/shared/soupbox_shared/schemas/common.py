from enum import Enum
from typing import Optional
from pydantic import BaseModel

class CommentType(str, Enum):
    SOUP = "soup"

class Pagination(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int

class StarResponse(BaseModel):
    star_count: int
    is_starred: Optional[bool] = None

class CountResponse(BaseModel):
    count: int
