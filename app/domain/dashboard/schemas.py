from pydantic import BaseModel

from ...schemas import CamelModel


class DashboardOverview(CamelModel):
    today_bookings_count: int
    active_clients_count: int
    monthly_revenue: float
    completed_services_count: int


class DashboardResponse(BaseModel):
    data: DashboardOverview
