from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class TipRequest(BaseModel):
    category: str = "cozinha"
    context: Optional[str] = None


class TipResponse(BaseModel):
    tip: str
    source: Literal["cache", "ia"]
    category: str
    remaining: int
    nextRefresh: datetime
