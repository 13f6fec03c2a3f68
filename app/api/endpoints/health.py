from typing import Any, Dict
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.db.async_session import check_async_database_health

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def health_check(request: Request):
    """
    Basic health check endpoint.

    Returns:
        dict: status and database connectivity; 503 when the database is unreachable
    """
    health = await check_async_database_health(request.app.state.db_manager)
    if health["status"] != "healthy":
        logger.error("Health check failed: database unreachable")
        return JSONResponse(status_code=503, content=health)
    return health
