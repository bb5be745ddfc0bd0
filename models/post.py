from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator


class Like(BaseModel):
    user_id: str


class Comment(BaseModel):
    id: str
    author_id: str
    author_name: str
    author_avatar: Optional[str] = None
    text: str
    created_at: datetime


class Post(BaseModel):
    id: Optional[str] = None
    author_id: str
    author_name: str
    author_avatar: Optional[str] = None
    text: str
    likes: List[Like] = []
    comments: List[Comment] = []
    created_at: datetime


class PostList(BaseModel):
    count: int
    posts: List[Post]


class PostRequest(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_required(cls, value: str) -> str:
        # stored as sent, escaping is up to whoever renders it
        text = value.strip()
        if not text:
            raise ValueError("Text is required")
        return text


class CommentRequest(PostRequest):
    pass
