"""Health check endpoints."""

from fastapi import APIRouter

from faux_packet import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Faux Packet",
        "version": __version__,
        "description": "In-memory Packet API for client testing",
        "docs": "/docs",
        "openapi": "/openapi.json",
    }
