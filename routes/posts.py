from typing import Dict, List

from fastapi import APIRouter

from dependencies import CurrentAccount, CurrentUser, Posts
from models.post import Comment, CommentRequest, Like, Post, PostList, PostRequest

router = APIRouter()


@router.post("")
def create_post(
        posts: Posts,
        post_data: PostRequest,
        account: CurrentAccount
) -> Post:
    """Create a new post"""
    return posts.create(account.id, account.name, account.avatar, post_data.text)


@router.get("")
def get_posts(posts: Posts, current_user: CurrentUser) -> PostList:
    """Get all posts, newest first"""
    all_posts = posts.list()
    return PostList(count=len(all_posts), posts=all_posts)


@router.get("/{post_id}")
def get_post(posts: Posts, post_id: str, current_user: CurrentUser) -> Dict[str, Post]:
    """Get a single post by ID"""
    return {"post": posts.get(post_id)}


@router.delete("/{post_id}")
def delete_post(posts: Posts, post_id: str, current_user: CurrentUser) -> Dict[str, str]:
    """Delete a post, only its author may do this"""
    posts.delete(post_id, current_user.user_id)
    return {"msg": "Post removed"}


@router.put("/like/{post_id}")
def like_post(posts: Posts, post_id: str, current_user: CurrentUser) -> List[Like]:
    """Like a post"""
    return posts.like(post_id, current_user.user_id)


@router.put("/unlike/{post_id}")
def unlike_post(posts: Posts, post_id: str, current_user: CurrentUser) -> List[Like]:
    """Undo the current user's like"""
    return posts.unlike(post_id, current_user.user_id)


@router.post("/comment/{post_id}")
def add_comment(
        posts: Posts,
        post_id: str,
        comment: CommentRequest,
        account: CurrentAccount
) -> List[Comment]:
    """Add a comment to a post"""
    return posts.add_comment(post_id, account.id, account.name, account.avatar, comment.text)


@router.delete("/comment/{post_id}/{comment_id}")
def delete_comment(
        posts: Posts,
        post_id: str,
        comment_id: str,
        current_user: CurrentUser
) -> List[Comment]:
    """Delete one of the current user's comments"""
    return posts.delete_comment(post_id, comment_id, current_user.user_id)
