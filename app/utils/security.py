"""
Security utilities and authentication
"""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import time
from collections import defaultdict

from app.core.config import settings
from app.core.db import get_db
from app.core.exceptions import PermissionDeniedError
from app.schemas.user import AuthSession
from app.services.auth_service import AuthService
from app.utils.responses import rate_limit_error

# Simple in-memory rate limiter
rate_limiter = defaultdict(list)

security = HTTPBearer()

def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> AuthSession:
    """Resolve the bearer token into a session with a freshly loaded user"""
    return AuthService.resolve_session(db, credentials.credentials)

def require_organizer(session: AuthSession = Depends(get_current_session)) -> AuthSession:
    """Only organizers may manage events"""
    if session.user.role != "organizer":
        raise PermissionDeniedError("Organizer account required")
    return session

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Clean old requests
    rate_limiter[client_ip] = [
        req_time for req_time in rate_limiter[client_ip]
        if req_time > minute_ago
    ]

    if len(rate_limiter[client_ip]) >= limit:
        return False

    rate_limiter[client_ip].append(current_time)
    return True

def enforce_rate_limit(request: Request):
    """Route dependency rejecting clients over the per-minute budget"""
    if not rate_limit_check(get_client_ip(request)):
        rate_limit_error()

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    # Check for forwarded IP first (for reverse proxy setups)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host
