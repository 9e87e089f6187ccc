"""Route dependencies resolved from the application's composition root"""

from typing import Optional

from fastapi import Header, HTTPException, Request, Response, Depends

from ..core.session import CartSessions
from ..database.carts import CartStore
from ..services.cms_client import CMSClient
from ..services.commerce_client import CommerceClient


def get_commerce_client(request: Request) -> CommerceClient:
    return request.app.state.commerce_client


def get_cms_client(request: Request) -> CMSClient:
    return request.app.state.cms_client


def get_cart_sessions(request: Request) -> CartSessions:
    return request.app.state.cart_sessions


def get_session_id(
    response: Response,
    x_session_id: Optional[str] = Header(None),
) -> str:
    """Session ID from the X-Session-Id header; a new one is issued when absent"""
    session_id = x_session_id or CartSessions.new_session_id()
    try:
        CartSessions.validate_session_id(session_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid session ID")

    response.headers["X-Session-Id"] = session_id
    return session_id


def get_cart_store(
    session_id: str = Depends(get_session_id),
    sessions: CartSessions = Depends(get_cart_sessions),
) -> CartStore:
    return sessions.get_or_create(session_id)


def get_existing_cart_store(
    x_session_id: Optional[str] = Header(None),
    session_id: str = Depends(get_session_id),
    sessions: CartSessions = Depends(get_cart_sessions),
) -> Optional[CartStore]:
    """Store for a session the client already holds; a freshly issued ID has none yet"""
    if not x_session_id:
        return None
    return sessions.get_or_create(session_id)
