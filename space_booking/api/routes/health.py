from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from space_booking.adapters.persistence.database import Database
from space_booking.api.dependencies import get_database

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(database: Annotated[Database | None, Depends(get_database)]) -> dict:
    """Health check endpoint.

    Reports the service as "ok" while the database answers a ping and as
    "degraded" otherwise. Used by load balancers and monitoring systems.

    Returns:
        dict: Overall "status" and the "database" ping result.
    """

    if database is None:
        return {"status": "ok"}

    db_health = database.health()
    status = "ok" if db_health["status"] == "up" else "degraded"
    return {"status": status, "database": db_health}
