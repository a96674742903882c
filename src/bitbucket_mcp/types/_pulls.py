"""pull request tool inputs"""

from typing import Literal

from pydantic import Field

from bitbucket_mcp.settings import DEFAULT_CONTEXT_LINES, DEFAULT_MERGE_STRATEGY
from bitbucket_mcp.types._common import (
    JsonInt,
    NonEmptyStr,
    PullRequestIdentity,
    RepositoryRef,
)

MergeStrategy = Literal["merge-commit", "squash", "fast-forward"]


class CreatePullRequestInput(RepositoryRef):
    """arguments of create_pull_request"""

    title: NonEmptyStr = Field(description="PR title")
    description: str | None = Field(default=None, description="PR description")
    source_branch: NonEmptyStr = Field(
        alias="sourceBranch", description="Source branch name"
    )
    target_branch: NonEmptyStr = Field(
        alias="targetBranch", description="Target branch name"
    )
    # order is preserved and duplicates are passed through; the server decides
    reviewers: list[str] | None = Field(
        default=None, description="List of reviewer usernames"
    )


class MergePullRequestInput(PullRequestIdentity):
    """arguments of merge_pull_request"""

    message: str | None = Field(default=None, description="Merge commit message")
    strategy: MergeStrategy = Field(
        default=DEFAULT_MERGE_STRATEGY, description="Merge strategy to use"
    )


class DeclinePullRequestInput(PullRequestIdentity):
    """arguments of decline_pull_request"""

    message: str | None = Field(default=None, description="Reason for declining")


class AddCommentInput(PullRequestIdentity):
    """arguments of add_comment"""

    text: NonEmptyStr = Field(description="Comment text")
    parent_id: JsonInt | None = Field(
        default=None, alias="parentId", description="Parent comment ID for replies"
    )


class GetDiffInput(PullRequestIdentity):
    """arguments of get_diff"""

    context_lines: JsonInt = Field(
        default=DEFAULT_CONTEXT_LINES,
        ge=0,
        alias="contextLines",
        description="Number of context lines",
    )
