"""Dependency injection for FastAPI endpoints"""

from fastapi import HTTPException, Request
from settlement_gateway.infrastructure.clients.backoffice import BackofficeClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_backoffice_client() -> BackofficeClient:
    """Provide back-office API client instance"""
    return BackofficeClient()


def unprocessable(reason: str, message: str, **extra) -> HTTPException:
    """422 carrying a typed rejection reason the UI can render a message for"""
    return HTTPException(status_code=422, detail={"reason": reason, "message": message, **extra})
