from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from vidtube.schemas.user import OwnerSummary


class SubscriberItem(BaseModel):
    id: str
    subscribed_at: datetime
    subscriber: Optional[OwnerSummary] = None
