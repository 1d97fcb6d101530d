"""
Dashboard aggregator.

Five independent reads run concurrently; each section is filled from its own
read and a failed read only blanks its own section.
"""

import asyncio
import logging
from typing import Any

from pathy_admin.chats import ChatsAPI
from pathy_admin.consultations import ConsultationsAPI
from pathy_admin.models.dashboard import ChartDataset, Counters, Dashboard
from pathy_admin.models.records import Flag, UserRecord
from pathy_admin.orders import OrdersAPI
from pathy_admin.payments import PaymentsAPI
from pathy_admin.users import UsersAPI

RECENT_LIMIT = 5

USER_SCORES = "user_scores"
PAYMENT_ANALYTICS = "payment_analytics"
RECENT_CHATS = "recent_chats"
RECENT_CONSULTATIONS = "recent_consultations"
RECENT_ORDERS = "recent_orders"

FLAG_LABELS = ["Green Flag", "Yellow Flag", "Red Flag"]
PAYMENT_SOURCE_LABELS = ["Online/Card", "Cash", "Other"]

logger = logging.getLogger(__name__)


def flag_histogram(users: list[UserRecord]) -> ChartDataset:
    counts = {flag: 0 for flag in Flag}
    for user in users:
        if user.flag is not None:
            counts[user.flag] += 1
    return ChartDataset(labels=FLAG_LABELS, values=[counts[Flag.GREEN], counts[Flag.YELLOW], counts[Flag.RED]])


def _amount(value: Any) -> float:
    """Numeric total from the analytics payload; missing or blank counts as zero."""
    if value is None or value == "":
        return 0
    return float(value)


def payment_sources(analytics: dict[str, Any]) -> ChartDataset:
    types = analytics.get("paymentTypes") or {}
    online = types.get("online") or types.get("card") or types.get("subscription") or 0
    cash = types.get("cash") or types.get("product") or 0
    other = types.get("other") or 0
    return ChartDataset(labels=PAYMENT_SOURCE_LABELS, values=[online, cash, other])


class DashboardAggregator:
    def __init__(
        self,
        users: UsersAPI,
        payments: PaymentsAPI,
        chats: ChatsAPI,
        consultations: ConsultationsAPI,
        orders: OrdersAPI,
    ):
        self._users = users
        self._payments = payments
        self._chats = chats
        self._consultations = consultations
        self._orders = orders

    async def load(self) -> Dashboard:
        reads = {
            USER_SCORES: self._users.list_scores(),
            PAYMENT_ANALYTICS: self._payments.analytics(),
            RECENT_CHATS: self._chats.list(limit=RECENT_LIMIT),
            RECENT_CONSULTATIONS: self._consultations.list(limit=RECENT_LIMIT),
            RECENT_ORDERS: self._orders.list(limit=RECENT_LIMIT),
        }
        results = await asyncio.gather(*reads.values(), return_exceptions=True)

        dashboard = Dashboard()
        counters: dict[str, Any] = {}
        for section, result in zip(reads, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result  # cancellation
                self._fail(dashboard, section, result)
                continue
            try:
                counters.update(self._fill(dashboard, section, result))
            except (TypeError, ValueError) as e:
                self._fail(dashboard, section, e)
        dashboard.counters = Counters(**counters)
        return dashboard

    @staticmethod
    def _fail(dashboard: Dashboard, section: str, error: Exception) -> None:
        logger.warning("Dashboard section %s failed: %s", section, error)
        dashboard.errors[section] = str(error) or type(error).__name__

    @staticmethod
    def _fill(dashboard: Dashboard, section: str, result: Any) -> dict[str, Any]:
        """Fill one section; returns its counters. Raises before touching ``dashboard`` on bad data."""
        if section == USER_SCORES:
            histogram = flag_histogram(result)
            dashboard.flag_histogram = histogram
            return {"total_users": len(result), "green_flag_users": int(histogram.values[0])}
        if section == PAYMENT_ANALYTICS:
            values = {
                "total_revenue": _amount(result.get("totalRevenue")),
                "total_payments": int(_amount(result.get("totalPayments"))),
            }
            dashboard.payment_sources = payment_sources(result)
            return values
        if section == RECENT_CHATS:
            dashboard.recent_chats = result[:RECENT_LIMIT]
        elif section == RECENT_CONSULTATIONS:
            dashboard.recent_consultations = result[:RECENT_LIMIT]
        elif section == RECENT_ORDERS:
            dashboard.recent_orders = result[:RECENT_LIMIT]
        return {}
