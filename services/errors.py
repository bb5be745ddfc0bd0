from typing import Optional

from fastapi import HTTPException


class ApiError(HTTPException):
    """Base for errors that map straight to an HTTP response"""
    status_code = 500
    detail = "Server Error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=type(self).status_code, detail=detail or type(self).detail)


class StoreError(ApiError):
    pass


class Unauthenticated(ApiError):
    status_code = 401
    detail = "Invalid authorization header"


class Unauthorized(ApiError):
    status_code = 401
    detail = "User not authorized"


class PostNotFound(ApiError):
    status_code = 404
    detail = "Post not found"


class CommentNotFound(ApiError):
    status_code = 404
    detail = "Comment does not exist"


class UserNotFound(ApiError):
    status_code = 404
    detail = "User not found"


class ProfileNotFound(ApiError):
    status_code = 404
    detail = "Profile not found"


class AlreadyLiked(ApiError):
    status_code = 400
    detail = "Post already liked"


class NotYetLiked(ApiError):
    status_code = 400
    detail = "Post has not yet been liked"


class AlreadyRegistered(ApiError):
    status_code = 400
    detail = "User already exists"
