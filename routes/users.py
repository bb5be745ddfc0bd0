import hashlib
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter

from dependencies import CurrentUser, Firestore
from models.user import UserAccount, UserCreate
from services.errors import AlreadyRegistered

router = APIRouter()


def gravatar_url(email: Optional[str]) -> Optional[str]:
    """Gravatar image for an email, the generic silhouette when it has none"""
    if not email:
        return None
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s=200&r=pg&d=mm"


@router.post("")
def register_user(db: Firestore, user_data: UserCreate, current_user: CurrentUser) -> UserAccount:
    """Register the authenticated Firebase user with a display name and avatar"""
    if db.get_user(current_user.user_id) is not None:
        raise AlreadyRegistered()

    account = UserAccount(
        id=current_user.user_id,
        name=user_data.name,
        email=current_user.email,
        avatar=user_data.avatar or gravatar_url(current_user.email),
        created_at=datetime.now(timezone.utc),
    )
    return db.create_user(account)
