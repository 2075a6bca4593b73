from pydantic import BaseModel
from typing import Optional


class Entitlement(BaseModel):
    subscribed: bool
    subscription_id: Optional[str] = None
    status: Optional[str] = None
    current_period_end: Optional[int] = None


class CheckoutResponse(BaseModel):
    url: str
