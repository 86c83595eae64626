"""Dependency injection for FastAPI endpoints"""

import uuid
from typing import Optional
from fastapi import Header, HTTPException, Request


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> str:
    """
    Identify the signed-in user.

    Authentication happens upstream; the authenticated user id arrives in the
    X-User-ID header and is passed explicitly to every repository call.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Sign-in required")
    return x_user_id.strip()


def parse_uuid(value: str, label: str) -> uuid.UUID:
    """Parse a path identifier, rejecting malformed ids with 400"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")
