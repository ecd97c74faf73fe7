"""
User profile routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.exceptions import NotFoundError
from app.schemas.user import AuthSession, UserUpdate
from app.services.registration_service import RegistrationService
from app.services.user_service import UserService
from app.utils.security import get_current_session
from app.utils.responses import success_response

router = APIRouter()

@router.get("/me")
async def get_profile(session: AuthSession = Depends(get_current_session)):
    return success_response(
        message="Profile retrieved",
        data=session.user
    )

@router.patch("/me")
async def update_profile(
    update_data: UserUpdate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    """Partially update the signed-in user's profile"""
    user = UserService.update_user(db, session.user.id, update_data)
    return success_response(
        message="Profile updated successfully",
        data=user
    )

@router.get("/me/stats")
async def get_stats(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    """Dashboard counters for the signed-in user"""
    return success_response(
        message="Stats retrieved",
        data=UserService.get_user_stats(db, session.user.id)
    )

@router.get("/me/registrations")
async def get_my_registrations(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    return success_response(
        message="Registrations retrieved",
        data=RegistrationService.get_user_registrations(db, session.user.id)
    )

@router.get("/{user_id}")
async def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    """Public profile of another user"""
    user = UserService.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User")

    return success_response(
        message="User retrieved",
        data=user
    )
