from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Business error codes; ``value // 100`` is the HTTP status they map to."""

    INVALID_PARAMETER = 40000
    MISSING_REQUIRED_PARAMETER = 40001
    UNSUPPORTED_FILE_FORMAT = 40002
    VIDEO_NOT_IN_PLAYLIST = 40003
    SELF_SUBSCRIPTION_NOT_ALLOWED = 40004

    AUTH_TOKEN_NOT_PROVIDED = 40100
    AUTH_TOKEN_INVALID = 40101
    AUTH_TOKEN_EXPIRED = 40102
    INVALID_CREDENTIALS = 40103

    PERMISSION_DENIED = 40300

    USER_NOT_FOUND = 40400
    CHANNEL_NOT_FOUND = 40401
    VIDEO_NOT_FOUND = 40402
    COMMENT_NOT_FOUND = 40403
    TWEET_NOT_FOUND = 40404
    PLAYLIST_NOT_FOUND = 40405

    USER_ALREADY_EXISTS = 40900

    SYSTEM_ERROR = 50000

    MEDIA_UPLOAD_FAILED = 50200
    MEDIA_DELETE_FAILED = 50201

    @property
    def http_status(self) -> int:
        return self.value // 100
