import functools
import logging
from typing import Callable, List, Optional, TypeVar

import firebase_admin
from firebase_admin import firestore as fs
from google.api_core.exceptions import GoogleAPICallError
from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter

from models.post import Post
from models.profile import Profile
from models.user import UserAccount
from services.errors import PostNotFound, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Firestore caps a write batch at 500 operations
BATCH_SIZE = 500


def is_valid_document_id(doc_id: str) -> bool:
    """Check an id against Firestore's document id rules"""
    if not doc_id or doc_id in (".", ".."):
        return False
    if "/" in doc_id:
        return False
    if doc_id.startswith("__") and doc_id.endswith("__"):
        return False
    return len(doc_id.encode("utf-8")) <= 1500


def store_call(func):
    """Log Firestore API failures and surface them as a generic StoreError"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GoogleAPICallError as e:
            logger.exception("Firestore call %s failed", func.__name__)
            raise StoreError() from e

    return wrapper


class FirestoreDB:
    def __init__(self, app: firebase_admin.App):
        self.db = fs.client(app)

    def collection(self, name: str):
        return self.db.collection(name)

    @store_call
    def get_all_posts(self) -> List[Post]:
        """Get all posts sorted by creation date descending"""
        posts_ref = self.collection("posts").order_by("created_at", direction=firestore.Query.DESCENDING).stream()
        return [Post(id=doc.id, **doc.to_dict()) for doc in posts_ref]

    @store_call
    def create_post(self, post: Post) -> Post:
        """Insert a post and return it with its generated ID"""
        new_post_ref = self.collection("posts").document()
        new_post_ref.set(post.model_dump(exclude={"id"}))
        return post.model_copy(update={"id": new_post_ref.id})

    @store_call
    def get_post(self, post_id: str) -> Optional[Post]:
        """Get a post by ID, None when it does not exist or the ID is malformed"""
        if not is_valid_document_id(post_id):
            return None
        snapshot = self.collection("posts").document(post_id).get()
        if not snapshot.exists:
            return None
        return Post(id=snapshot.id, **snapshot.to_dict())

    @store_call
    def update_post(self, post_id: str, mutate: Callable[[Post], T]) -> T:
        """
        Read a post, apply `mutate` to it and write its likes and comments back,
        all inside one transaction.

        `mutate` edits the post in place and its return value is passed through.
        Anything it raises aborts the transaction without writing.
        """
        if not is_valid_document_id(post_id):
            raise PostNotFound()

        post_ref = self.collection("posts").document(post_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def update_in_transaction(transaction, post_ref):
            snapshot = post_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise PostNotFound()

            post = Post(id=snapshot.id, **snapshot.to_dict())
            result = mutate(post)

            transaction.update(post_ref, post.model_dump(include={"likes", "comments"}))
            return result

        return update_in_transaction(transaction, post_ref)

    @store_call
    def delete_post(self, post_id: str):
        self.collection("posts").document(post_id).delete()

    @store_call
    def delete_posts_by_author(self, author_id: str) -> int:
        """Delete every post written by a user, returns how many were removed"""
        docs = list(self.collection("posts").where(
            filter=FieldFilter("author_id", "==", author_id)
        ).stream())

        for i in range(0, len(docs), BATCH_SIZE):
            batch = self.db.batch()
            for doc in docs[i:i + BATCH_SIZE]:
                batch.delete(doc.reference)
            batch.commit()

        return len(docs)

    @store_call
    def get_user(self, user_id: str) -> Optional[UserAccount]:
        if not is_valid_document_id(user_id):
            return None
        snapshot = self.collection("users").document(user_id).get()
        if not snapshot.exists:
            return None
        return UserAccount(id=snapshot.id, **snapshot.to_dict())

    @store_call
    def create_user(self, account: UserAccount) -> UserAccount:
        self.collection("users").document(account.id).set(account.model_dump(exclude={"id"}))
        return account

    @store_call
    def delete_user(self, user_id: str):
        self.collection("users").document(user_id).delete()

    @store_call
    def get_profile(self, user_id: str) -> Optional[Profile]:
        if not is_valid_document_id(user_id):
            return None
        snapshot = self.collection("profiles").document(user_id).get()
        if not snapshot.exists:
            return None
        return Profile(**snapshot.to_dict())

    @store_call
    def get_all_profiles(self) -> List[Profile]:
        return [Profile(**doc.to_dict()) for doc in self.collection("profiles").stream()]

    @store_call
    def save_profile(self, profile: Profile) -> Profile:
        """Create or replace the profile of `profile.user_id`"""
        self.collection("profiles").document(profile.user_id).set(profile.model_dump())
        return profile

    @store_call
    def delete_profile(self, user_id: str):
        self.collection("profiles").document(user_id).delete()
