"""bitbucket server API client"""

from bitbucket_mcp._bitbucket._client import (
    api_error_message,
    create_http_client,
    request_json,
    request_text,
)
from bitbucket_mcp._bitbucket._pulls import (
    REVIEW_ACTIONS,
    add_comment,
    create_pull_request,
    decline_pull_request,
    get_diff,
    get_pull_request,
    get_reviews,
    merge_pull_request,
)

__all__ = [
    "api_error_message",
    "create_http_client",
    "request_json",
    "request_text",
    "REVIEW_ACTIONS",
    "create_pull_request",
    "get_pull_request",
    "merge_pull_request",
    "decline_pull_request",
    "add_comment",
    "get_diff",
    "get_reviews",
]
