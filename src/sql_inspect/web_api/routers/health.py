"""
Health Router
=============
Liveness and readiness probes.
"""
from fastapi import APIRouter

from sql_inspect import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness: the process is up."""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def readiness_check():
    """
    Readiness: the engine keeps no connections between requests, so it is
    ready as soon as the app has loaded.
    """
    return {"status": "ready"}
