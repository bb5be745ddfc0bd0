import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from models.post import Comment, Like, Post
from services.errors import (
    AlreadyLiked,
    CommentNotFound,
    NotYetLiked,
    PostNotFound,
    Unauthorized,
)
from services.firestore import FirestoreDB

logger = logging.getLogger(__name__)


class PostService:
    """
    Post operations on top of the Firestore store.

    Every mutation of an existing post goes through `FirestoreDB.update_post`,
    so the checks below and the write that follows them run in one transaction.
    """

    def __init__(self, db: FirestoreDB):
        self.db = db

    def create(self, author_id: str, author_name: str, author_avatar: Optional[str], text: str) -> Post:
        post = Post(
            author_id=author_id,
            author_name=author_name,
            author_avatar=author_avatar,
            text=text,
            created_at=datetime.now(timezone.utc),
        )
        post = self.db.create_post(post)
        logger.info("User %s created post %s", author_id, post.id)
        return post

    def list(self) -> List[Post]:
        return self.db.get_all_posts()

    def get(self, post_id: str) -> Post:
        post = self.db.get_post(post_id)
        if post is None:
            raise PostNotFound()
        return post

    def delete(self, post_id: str, requester_id: str):
        post = self.get(post_id)

        # Only the author can remove a post
        if post.author_id != requester_id:
            raise Unauthorized()

        self.db.delete_post(post_id)
        logger.info("User %s deleted post %s", requester_id, post_id)

    def like(self, post_id: str, requester_id: str) -> List[Like]:
        def add_like(post: Post) -> List[Like]:
            if any(like.user_id == requester_id for like in post.likes):
                raise AlreadyLiked()
            post.likes.insert(0, Like(user_id=requester_id))
            return post.likes

        return self.db.update_post(post_id, add_like)

    def unlike(self, post_id: str, requester_id: str) -> List[Like]:
        def remove_like(post: Post) -> List[Like]:
            index = next(
                (i for i, like in enumerate(post.likes) if like.user_id == requester_id),
                None,
            )
            if index is None:
                raise NotYetLiked()
            del post.likes[index]
            return post.likes

        return self.db.update_post(post_id, remove_like)

    def add_comment(
            self,
            post_id: str,
            author_id: str,
            author_name: str,
            author_avatar: Optional[str],
            text: str,
    ) -> List[Comment]:
        comment = Comment(
            id=uuid.uuid4().hex,
            author_id=author_id,
            author_name=author_name,
            author_avatar=author_avatar,
            text=text,
            created_at=datetime.now(timezone.utc),
        )

        def prepend_comment(post: Post) -> List[Comment]:
            post.comments.insert(0, comment)
            return post.comments

        return self.db.update_post(post_id, prepend_comment)

    def delete_comment(self, post_id: str, comment_id: str, requester_id: str) -> List[Comment]:
        def remove_comment(post: Post) -> List[Comment]:
            comment = next((c for c in post.comments if c.id == comment_id), None)
            if comment is None:
                raise CommentNotFound()

            # Check if user is owner of the comment
            if comment.author_id != requester_id:
                raise Unauthorized()

            post.comments = [c for c in post.comments if c.id != comment_id]
            return post.comments

        return self.db.update_post(post_id, remove_comment)
