"""public types API for bitbucket MCP server"""

from bitbucket_mcp.types._common import (
    PullRequestIdentity,
    RepositoryRef,
    json_content,
    text_content,
)
from bitbucket_mcp.types._pulls import (
    AddCommentInput,
    CreatePullRequestInput,
    DeclinePullRequestInput,
    GetDiffInput,
    MergePullRequestInput,
    MergeStrategy,
)

__all__ = [
    "AddCommentInput",
    "CreatePullRequestInput",
    "DeclinePullRequestInput",
    "GetDiffInput",
    "MergePullRequestInput",
    "MergeStrategy",
    "PullRequestIdentity",
    "RepositoryRef",
    "json_content",
    "text_content",
]
