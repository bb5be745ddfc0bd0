import logging
from datetime import datetime, timezone
from typing import Dict, List

from fastapi import APIRouter

from dependencies import CurrentAccount, CurrentUser, Firestore
from models.profile import Profile, ProfileRequest
from services.errors import ProfileNotFound

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me")
def get_my_profile(db: Firestore, current_user: CurrentUser) -> Profile:
    profile = db.get_profile(current_user.user_id)
    if profile is None:
        raise ProfileNotFound("There is no profile for this user")
    return profile


@router.post("")
def save_profile(db: Firestore, profile_data: ProfileRequest, account: CurrentAccount) -> Profile:
    """Create the current user's profile, or replace it if one exists"""
    profile = Profile(
        user_id=account.id,
        name=account.name,
        avatar=account.avatar,
        updated_at=datetime.now(timezone.utc),
        **profile_data.model_dump(),
    )
    return db.save_profile(profile)


@router.get("")
def get_profiles(db: Firestore, current_user: CurrentUser) -> List[Profile]:
    return db.get_all_profiles()


@router.get("/user/{user_id}")
def get_profile_by_user(db: Firestore, user_id: str, current_user: CurrentUser) -> Profile:
    profile = db.get_profile(user_id)
    if profile is None:
        raise ProfileNotFound()
    return profile


@router.delete("")
def delete_account(db: Firestore, current_user: CurrentUser) -> Dict[str, str]:
    """Delete the current user's posts, profile and account"""
    user_id = current_user.user_id
    removed = db.delete_posts_by_author(user_id)
    db.delete_profile(user_id)
    db.delete_user(user_id)
    logger.info("Deleted user %s and %d of their posts", user_id, removed)
    return {"msg": "User deleted"}
