from pydantic import BaseModel
from typing import Dict, List

from fieldservice.schemas.client import ClientRead
from fieldservice.schemas.job import JobRead


class DashboardRead(BaseModel):
    total_clients: int
    total_jobs: int
    jobs_by_status: Dict[str, int]
    today_jobs: List[JobRead]
    completed_today: List[JobRead]
    unscheduled_jobs: List[JobRead]
    idle_clients: List[ClientRead]
