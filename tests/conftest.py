import itertools
from datetime import datetime, timezone
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from dependencies import get_current_user, get_firestore
from main import app
from models.post import Post
from models.profile import Profile
from models.user import User, UserAccount
from services.errors import PostNotFound, Unauthenticated
from services.firestore import is_valid_document_id
from services.posts import PostService


class InMemoryFirestore:
    """Dict backed stand-in for FirestoreDB with the same method surface."""

    def __init__(self):
        self.posts: Dict[str, dict] = {}
        self.users: Dict[str, dict] = {}
        self.profiles: Dict[str, dict] = {}
        self._ids = itertools.count(1)

    def get_all_posts(self):
        posts = [Post(id=post_id, **data) for post_id, data in self.posts.items()]
        return sorted(posts, key=lambda post: post.created_at, reverse=True)

    def create_post(self, post: Post) -> Post:
        post_id = f"post{next(self._ids)}"
        self.posts[post_id] = post.model_dump(exclude={"id"})
        return post.model_copy(update={"id": post_id})

    def get_post(self, post_id: str) -> Optional[Post]:
        if not is_valid_document_id(post_id) or post_id not in self.posts:
            return None
        return Post(id=post_id, **self.posts[post_id])

    def update_post(self, post_id, mutate):
        post = self.get_post(post_id)
        if post is None:
            raise PostNotFound()
        # nothing is written when mutate raises, like an aborted transaction
        result = mutate(post)
        self.posts[post_id].update(post.model_dump(include={"likes", "comments"}))
        return result

    def delete_post(self, post_id: str):
        self.posts.pop(post_id, None)

    def delete_posts_by_author(self, author_id: str) -> int:
        doomed = [post_id for post_id, data in self.posts.items() if data["author_id"] == author_id]
        for post_id in doomed:
            del self.posts[post_id]
        return len(doomed)

    def get_user(self, user_id: str) -> Optional[UserAccount]:
        data = self.users.get(user_id)
        return UserAccount(id=user_id, **data) if data is not None else None

    def create_user(self, account: UserAccount) -> UserAccount:
        self.users[account.id] = account.model_dump(exclude={"id"})
        return account

    def delete_user(self, user_id: str):
        self.users.pop(user_id, None)

    def get_profile(self, user_id: str) -> Optional[Profile]:
        data = self.profiles.get(user_id)
        return Profile(**data) if data is not None else None

    def get_all_profiles(self):
        return [Profile(**data) for data in self.profiles.values()]

    def save_profile(self, profile: Profile) -> Profile:
        self.profiles[profile.user_id] = profile.model_dump()
        return profile

    def delete_profile(self, user_id: str):
        self.profiles.pop(user_id, None)


class AuthState:
    """Which user the overridden auth dependency resolves to"""

    def __init__(self):
        self.user: Optional[User] = None

    def login(self, user_id: str):
        self.user = User(user_id=user_id, email=f"{user_id}@example.com")

    def logout(self):
        self.user = None


def make_account(user_id: str, name: str) -> UserAccount:
    return UserAccount(
        id=user_id,
        name=name,
        email=f"{user_id}@example.com",
        avatar=f"https://example.com/{user_id}.png",
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def db():
    return InMemoryFirestore()


@pytest.fixture
def service(db):
    return PostService(db)


@pytest.fixture
def auth():
    return AuthState()


@pytest.fixture
def client(db, auth):
    async def current_user():
        if auth.user is None:
            raise Unauthenticated()
        return auth.user

    app.dependency_overrides[get_current_user] = current_user
    app.dependency_overrides[get_firestore] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(db):
    """Store an account for a user id, as POST /users would"""
    def _register(user_id: str, name: str) -> UserAccount:
        return db.create_user(make_account(user_id, name))

    return _register
