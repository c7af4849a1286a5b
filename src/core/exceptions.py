"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    MUST_BE_LOGGED_IN = "MUST_BE_LOGGED_IN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    PASSWORD_REQUIRED = "PASSWORD_REQUIRED"

    # Authorization errors (403)
    INVALID_PASSWORD = "INVALID_PASSWORD"
    NOT_ADMIN = "NOT_ADMIN"
    NOT_A_MEMBER = "NOT_A_MEMBER"

    # Not found errors (404)
    NOT_FOUND = "NOT_FOUND"
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    POST_NOT_FOUND = "POST_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CANNOT_MODIFY_SELF = "CANNOT_MODIFY_SELF"
    ONLY_REGISTERED_USERS_CAN_BE_ADMINS = "ONLY_REGISTERED_USERS_CAN_BE_ADMINS"
    REPLY_DEPTH_EXCEEDED = "REPLY_DEPTH_EXCEEDED"

    # Conflict errors (409)
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    USERNAME_TAKEN = "USERNAME_TAKEN"
    SLUG_ALREADY_TAKEN = "SLUG_ALREADY_TAKEN"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationFailedError(AppException):
    """Malformed display name, email, password, slug or content."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class MustBeLoggedInError(AppException):
    """The operation requires a platform account session."""

    def __init__(self, message: str = "You must be logged in") -> None:
        super().__init__(
            error_code=ErrorCode.MUST_BE_LOGGED_IN,
            message=message,
            status_code=401,
        )


class InvalidCredentialsError(AppException):
    """Login identifier or password did not match."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_CREDENTIALS,
            message="Invalid email/username or password",
            status_code=401,
        )


class PasswordRequiredError(AppException):
    """The group is password protected and no password was given."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.PASSWORD_REQUIRED,
            message="Password required",
            status_code=401,
        )


class InvalidPasswordError(AppException):
    """The group password did not match."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_PASSWORD,
            message="Invalid password",
            status_code=403,
        )


class NotAdminError(AppException):
    """The acting membership is absent or not an admin of the group."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_ADMIN,
            message="Admins only",
            status_code=403,
            details={"group_id": group_id},
        )


class NotAMemberError(AppException):
    """No membership resolves for the caller in this group."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_MEMBER,
            message="Choose a display name to join this group first",
            status_code=403,
            details={"group_id": group_id},
        )


class CannotModifySelfError(AppException):
    """An admin tried to remove themselves or change their own role."""

    def __init__(self, message: str = "You cannot modify your own membership") -> None:
        super().__init__(
            error_code=ErrorCode.CANNOT_MODIFY_SELF,
            message=message,
            status_code=400,
        )


class OnlyRegisteredUsersCanBeAdminsError(AppException):
    """Guest memberships cannot hold admin rights."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ONLY_REGISTERED_USERS_CAN_BE_ADMINS,
            message="Only registered users can be admins",
            status_code=400,
            details={"member_id": member_id},
        )


class ReplyDepthExceededError(AppException):
    """Replies are limited to two levels."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.REPLY_DEPTH_EXCEEDED,
            message="Replies are limited to 2 levels",
            status_code=400,
        )


class GroupNotFoundError(AppException):
    """Group not found."""

    def __init__(self, group_ref: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_NOT_FOUND,
            message=f"Group not found: {group_ref}",
            status_code=404,
            details={"group": group_ref},
        )


class MemberNotFoundError(AppException):
    """Membership not found."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_NOT_FOUND,
            message=f"Member not found: {member_id}",
            status_code=404,
            details={"member_id": member_id},
        )


class PostNotFoundError(AppException):
    """Post not found."""

    def __init__(self, post_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.POST_NOT_FOUND,
            message=f"Post not found: {post_id}",
            status_code=404,
            details={"post_id": post_id},
        )


class CommentNotFoundError(AppException):
    """Comment not found."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COMMENT_NOT_FOUND,
            message=f"Comment not found: {comment_id}",
            status_code=404,
            details={"comment_id": comment_id},
        )


class EmailAlreadyRegisteredError(AppException):
    """An account with this email already exists."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.EMAIL_ALREADY_REGISTERED,
            message="An account with this email already exists",
            status_code=409,
        )


class UsernameTakenError(AppException):
    """Username is already used by another account."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.USERNAME_TAKEN,
            message=f"Username already taken: {username}",
            status_code=409,
            details={"username": username},
        )


class SlugAlreadyTakenError(AppException):
    """Group slug is already taken."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            error_code=ErrorCode.SLUG_ALREADY_TAKEN,
            message=f"Slug already taken: {slug}",
            status_code=409,
            details={"slug": slug},
        )
