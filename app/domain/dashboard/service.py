"""Dashboard service - admin overview figures"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from .repository import DashboardRepository

logger = logging.getLogger(__name__)

ACTIVE_CLIENT_WINDOW_DAYS = 30


def _first_of_next_month(moment: datetime) -> datetime:
    if moment.month == 12:
        return moment.replace(year=moment.year + 1, month=1, day=1)
    return moment.replace(month=moment.month + 1, day=1)


class DashboardService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = DashboardRepository()

    def get_overview(self, now: Optional[datetime] = None) -> dict:
        """
        Overview figures relative to `now` (server local time by default):

        - todayBookingsCount: bookings dated today
        - activeClientsCount: distinct clients with a booking in the last 30 days
          (through the end of today)
        - monthlyRevenue: service prices of this month's completed bookings
        - completedServicesCount: number of this month's completed bookings
        """
        now = now or datetime.now()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)
        month_start = today.replace(day=1)
        next_month_start = _first_of_next_month(month_start)

        today_count = self.repo.count_bookings_between(self.db, today, tomorrow)
        active_clients = self.repo.count_distinct_clients_between(
            self.db, now - timedelta(days=ACTIVE_CLIENT_WINDOW_DAYS), tomorrow
        )
        completed_count, revenue = self.repo.completed_totals_between(
            self.db, month_start, next_month_start
        )

        logger.debug(
            f"📊 Dashboard: today={today_count}, clients={active_clients}, "
            f"completed={completed_count}, revenue={revenue:.2f}"
        )
        return {
            "today_bookings_count": today_count,
            "active_clients_count": active_clients,
            "monthly_revenue": round(revenue, 2),
            "completed_services_count": completed_count,
        }
