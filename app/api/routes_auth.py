"""
Authentication routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.user import AuthSession, SignInRequest, SignUpRequest
from app.services.auth_service import AuthService
from app.services.user_service import UserService
from app.utils.security import enforce_rate_limit, get_current_session
from app.utils.responses import success_response

router = APIRouter()

@router.post("/signup", dependencies=[Depends(enforce_rate_limit)])
async def sign_up(
    signup_data: SignUpRequest,
    db: Session = Depends(get_db)
):
    """Create a password account"""
    user_id = AuthService.sign_up(db, signup_data)
    return success_response(
        message="Account created successfully",
        data=UserService.get_user_by_id(db, user_id),
        status_code=201
    )

@router.post("/signin", dependencies=[Depends(enforce_rate_limit)])
async def sign_in(
    signin_data: SignInRequest,
    db: Session = Depends(get_db)
):
    """Exchange email and password for a session token"""
    session = AuthService.sign_in(db, signin_data.email, signin_data.password)
    return success_response(
        message="Signed in successfully",
        data=session
    )

@router.get("/session")
async def current_session(session: AuthSession = Depends(get_current_session)):
    """Return the session behind the bearer token"""
    return success_response(
        message="Session is valid",
        data=session
    )
