from .client import Client, ClientType
from .employee import Employee
from .job import Job, JobStatus
from .quote import Quote, QuoteStatus
from .app_config import AppConfig, ConfigType

__all__ = [
    "Client", "ClientType",
    "Employee",
    "Job", "JobStatus",
    "Quote", "QuoteStatus",
    "AppConfig", "ConfigType",
]
