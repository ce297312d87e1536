"""
Driving Estimate Endpoint Module

``POST /route`` returns the driving duration and distance between two
coordinates. It is stateless, needs no owner, and answers every outcome with
a small JSON body of its own (``{error}`` / ``{error, details}``) instead of
the API's ``{detail}`` shape.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from fieldservice.core.config import settings
from fieldservice.schemas.routing import RouteRequest, RouteResponse
from fieldservice.services.routing import (
    GoogleRoutesClient,
    LatLng,
    RoutingProviderError,
    fallback_estimate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_routes_client() -> Optional[GoogleRoutesClient]:
    """The traffic-aware provider, or None when no API key is configured."""
    if not settings.GOOGLE_ROUTES_API_KEY:
        return None
    return GoogleRoutesClient(
        api_key=settings.GOOGLE_ROUTES_API_KEY,
        url=settings.ROUTES_API_URL,
        timeout=settings.ROUTES_TIMEOUT_SECONDS,
    )


@router.post("/route", response_model=RouteResponse, tags=["routing"])
async def estimate_route(
    request: Request,
    routes_client: Optional[GoogleRoutesClient] = Depends(get_routes_client),
):
    """
    Estimate a drive between two points.

    Body: ``{origin: {lat, lng}, destination: {lat, lng}, departureTime?}``.

    Returns:
        200 ``{durationSeconds, distanceMeters, provider}``
        400 ``{error}`` when origin or destination is missing or not numeric
        502 ``{error, details}`` when the routing provider fails
        500 ``{error, details}`` on any other failure
    """
    try:
        try:
            payload = RouteRequest.model_validate(await request.json())
        except (ValueError, ValidationError):
            # ValueError covers an undecodable JSON body
            return JSONResponse(status_code=400, content={"error": "origin and destination are required"})

        origin = LatLng(payload.origin.lat, payload.origin.lng)
        destination = LatLng(payload.destination.lat, payload.destination.lng)

        if routes_client is None:
            estimate = fallback_estimate(origin, destination)
        else:
            estimate = await run_in_threadpool(
                routes_client.estimate, origin, destination, payload.departureTime
            )
        return estimate.as_response()
    except RoutingProviderError as exc:
        return JSONResponse(status_code=502, content={"error": exc.message, "details": exc.details})
    except Exception as exc:
        logger.exception("Route estimate failed")
        return JSONResponse(status_code=500, content={"error": "Unexpected error", "details": str(exc)})


@router.api_route("/route", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def route_method_not_allowed():
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})
