from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class StatusEntry(BaseModel):
    value: str = Field(min_length=1)
    label: str
    color: Optional[str] = None


class ConfigUpdate(BaseModel):
    statuses: List[StatusEntry]


class AppConfigRead(BaseModel):
    config_type: str
    config_data: Dict[str, Any]
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class LabelRead(BaseModel):
    value: str
    label: str
    color: str
