"""bitbucket server MCP server - pull request tools for bitbucket server"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastmcp import FastMCP
from mcp.types import TextContent
from pydantic import Field, ValidationError

from bitbucket_mcp._dispatch import Dispatcher
from bitbucket_mcp._logging import setup_logging
from bitbucket_mcp.settings import (
    DEFAULT_CONTEXT_LINES,
    DEFAULT_MERGE_STRATEGY,
    Settings,
)
from bitbucket_mcp.types import MergeStrategy

logger = logging.getLogger("bitbucket-mcp")

_dispatcher: Dispatcher | None = None

# set by main(); the lifespan builds and closes the dispatcher from it
_settings: Settings | None = None


@asynccontextmanager
async def bitbucket_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """own the HTTP client for the lifetime of a served session

    Only acts when main() stored settings and no dispatcher was installed
    with configure(); an installed dispatcher belongs to whoever installed it.
    """
    if _settings is None or _dispatcher is not None:
        yield {}
        return

    dispatcher = Dispatcher.from_settings(_settings)
    configure(dispatcher)
    try:
        yield {}
    finally:
        configure(None)
        await dispatcher.aclose()


bitbucket_mcp = FastMCP("bitbucket server MCP server", lifespan=bitbucket_lifespan)


def configure(dispatcher: Dispatcher | None) -> None:
    """install the dispatcher tool calls go through (None resets it)"""
    global _dispatcher
    _dispatcher = dispatcher


def get_dispatcher() -> Dispatcher:
    """the configured dispatcher, built from the environment on first use"""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = Dispatcher.from_settings(Settings())
    return _dispatcher


async def _call(name: str, **arguments: Any) -> list[TextContent]:
    # omitted optional arguments arrive as None; drop them so defaults apply
    present = {key: value for key, value in arguments.items() if value is not None}
    return await get_dispatcher().call(name, present)


Project = Annotated[
    str | None,
    Field(
        description="Bitbucket project key (defaults to BITBUCKET_DEFAULT_PROJECT)"
    ),
]
Repository = Annotated[str, Field(description="Repository slug")]
PullRequestId = Annotated[int, Field(description="Pull request ID")]


@bitbucket_mcp.tool
async def create_pull_request(
    repository: Repository,
    title: Annotated[str, Field(description="PR title")],
    sourceBranch: Annotated[str, Field(description="Source branch name")],
    targetBranch: Annotated[str, Field(description="Target branch name")],
    project: Project = None,
    description: Annotated[str | None, Field(description="PR description")] = None,
    reviewers: Annotated[
        list[str] | None, Field(description="List of reviewer usernames")
    ] = None,
) -> list[TextContent]:
    """Create a new pull request"""
    return await _call(
        "create_pull_request",
        project=project,
        repository=repository,
        title=title,
        description=description,
        sourceBranch=sourceBranch,
        targetBranch=targetBranch,
        reviewers=reviewers,
    )


@bitbucket_mcp.tool
async def get_pull_request(
    repository: Repository,
    prId: PullRequestId,
    project: Project = None,
) -> list[TextContent]:
    """Get pull request details"""
    return await _call(
        "get_pull_request", project=project, repository=repository, prId=prId
    )


@bitbucket_mcp.tool
async def merge_pull_request(
    repository: Repository,
    prId: PullRequestId,
    project: Project = None,
    message: Annotated[str | None, Field(description="Merge commit message")] = None,
    strategy: Annotated[
        MergeStrategy, Field(description="Merge strategy to use")
    ] = DEFAULT_MERGE_STRATEGY,
) -> list[TextContent]:
    """Merge a pull request"""
    return await _call(
        "merge_pull_request",
        project=project,
        repository=repository,
        prId=prId,
        message=message,
        strategy=strategy,
    )


@bitbucket_mcp.tool
async def decline_pull_request(
    repository: Repository,
    prId: PullRequestId,
    project: Project = None,
    message: Annotated[str | None, Field(description="Reason for declining")] = None,
) -> list[TextContent]:
    """Decline a pull request"""
    return await _call(
        "decline_pull_request",
        project=project,
        repository=repository,
        prId=prId,
        message=message,
    )


@bitbucket_mcp.tool
async def add_comment(
    repository: Repository,
    prId: PullRequestId,
    text: Annotated[str, Field(description="Comment text")],
    project: Project = None,
    parentId: Annotated[
        int | None, Field(description="Parent comment ID for replies")
    ] = None,
) -> list[TextContent]:
    """Add a comment to a pull request"""
    return await _call(
        "add_comment",
        project=project,
        repository=repository,
        prId=prId,
        text=text,
        parentId=parentId,
    )


@bitbucket_mcp.tool
async def get_diff(
    repository: Repository,
    prId: PullRequestId,
    project: Project = None,
    contextLines: Annotated[
        int, Field(ge=0, description="Number of context lines")
    ] = DEFAULT_CONTEXT_LINES,
) -> list[TextContent]:
    """Get pull request diff"""
    return await _call(
        "get_diff",
        project=project,
        repository=repository,
        prId=prId,
        contextLines=contextLines,
    )


@bitbucket_mcp.tool
async def get_reviews(
    repository: Repository,
    prId: PullRequestId,
    project: Project = None,
) -> list[TextContent]:
    """Get pull request reviews"""
    return await _call(
        "get_reviews", project=project, repository=repository, prId=prId
    )


def main() -> None:
    """read configuration, then serve over stdio"""
    global _settings
    try:
        settings = Settings()
    except ValidationError as e:
        sys.exit(f"invalid bitbucket configuration: {e}")

    _settings = settings
    setup_logging(settings.bitbucket_log_level, settings.bitbucket_log_file)

    logger.info("Bitbucket MCP server running on stdio")
    bitbucket_mcp.run()


if __name__ == "__main__":
    main()
