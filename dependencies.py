import logging
from typing import Annotated

from fastapi import Request, Depends
from firebase_admin.auth import verify_id_token

from models.user import User, UserAccount
from services.errors import Unauthenticated, UserNotFound
from services.firestore import FirestoreDB
from services.posts import PostService

logger = logging.getLogger(__name__)


def get_current_user(request: Request) -> User:
    """
    Verify Firebase ID token from Authorization header and return user info
    """
    authorization = request.headers.get("Authorization")
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated()

    token = authorization.split("Bearer ")[1]
    try:
        # Verify the Firebase ID token
        decoded_token = verify_id_token(token, check_revoked=True, clock_skew_seconds=10)
    except Exception as e:
        logger.warning("Invalid authentication token: %s", e)
        raise Unauthenticated("Invalid authentication token")

    return User(
        user_id=decoded_token["uid"],
        email=decoded_token.get("email"),
    )


async def get_firestore(request: Request) -> FirestoreDB:
    """ Get Firestore DB from app state """
    return request.app.state.firestore


async def get_post_service(db: Annotated[FirestoreDB, Depends(get_firestore)]) -> PostService:
    """Build the post service over the app's Firestore DB"""
    return PostService(db)


def get_current_account(
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[FirestoreDB, Depends(get_firestore)],
) -> UserAccount:
    """Registered account of the authenticated user, used for name/avatar"""
    account = db.get_user(current_user.user_id)
    if account is None:
        raise UserNotFound("User not found, register before posting")
    return account


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentAccount = Annotated[UserAccount, Depends(get_current_account)]
Firestore = Annotated[FirestoreDB, Depends(get_firestore)]
Posts = Annotated[PostService, Depends(get_post_service)]
