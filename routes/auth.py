from fastapi import APIRouter

from dependencies import CurrentAccount
from models.user import UserAccount

router = APIRouter()


@router.get("")
async def get_authenticated_user(account: CurrentAccount) -> UserAccount:
    """Return the account behind the bearer token"""
    return account
