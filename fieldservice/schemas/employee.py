from pydantic import BaseModel, Field
from typing import Optional


class EmployeeCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    is_active: bool = True


class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class EmployeeRead(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None
    is_active: bool
    created_at: Optional[str] = None

    class Config:
        from_attributes = True
