from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class Coordinates(BaseModel):
    # strict: "32.1", true and null are not coordinates
    model_config = ConfigDict(strict=True)

    lat: float = Field(allow_inf_nan=False)
    lng: float = Field(allow_inf_nan=False)


class RouteRequest(BaseModel):
    origin: Coordinates
    destination: Coordinates
    departureTime: Optional[str] = None


class RouteResponse(BaseModel):
    durationSeconds: int
    distanceMeters: int
    provider: str
