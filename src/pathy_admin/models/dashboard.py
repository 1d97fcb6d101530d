"""
Dashboard summary models.
"""

from typing import Optional

from pydantic import BaseModel, Field

from pathy_admin.models.chat import Conversation
from pathy_admin.models.records import Consultation, Order


class ChartDataset(BaseModel):
    labels: list[str]
    values: list[float]

    @property
    def total(self) -> float:
        return sum(self.values)


class Counters(BaseModel):
    total_users: Optional[int] = None
    green_flag_users: Optional[int] = None
    total_revenue: Optional[float] = None
    total_payments: Optional[int] = None


class Dashboard(BaseModel):
    """Assembled dashboard. A ``None`` section means its read failed; see ``errors``."""

    counters: Counters = Field(default_factory=Counters)
    flag_histogram: Optional[ChartDataset] = None
    payment_sources: Optional[ChartDataset] = None
    recent_chats: list[Conversation] = Field(default_factory=list)
    recent_consultations: list[Consultation] = Field(default_factory=list)
    recent_orders: list[Order] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)

    def failed(self, section: str) -> bool:
        return section in self.errors
