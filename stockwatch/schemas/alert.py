from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AlertRead(BaseModel):
    id: int
    alert_type: str
    item_id: Optional[int] = None
    phone_number: str
    message: str
    delivered: bool
    failure_reason: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
