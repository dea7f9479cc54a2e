from __future__ import annotations

from pydantic import BaseModel

from ..matching.models import Neighborhood


class NeighborhoodPage(BaseModel):
    neighborhoods: list[Neighborhood]
    total: int
    total_pages: int
    current_page: int
