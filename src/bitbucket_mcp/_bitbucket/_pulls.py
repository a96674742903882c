"""pull request operations for bitbucket server"""

from typing import Any

import httpx

from bitbucket_mcp._bitbucket._client import request_json, request_text
from bitbucket_mcp.settings import ANY_VERSION
from bitbucket_mcp.types import (
    AddCommentInput,
    CreatePullRequestInput,
    DeclinePullRequestInput,
    GetDiffInput,
    MergePullRequestInput,
    PullRequestIdentity,
)

# activity actions that count as a review
REVIEW_ACTIONS = frozenset({"APPROVED", "REVIEWED"})


def _branch_ref(data: CreatePullRequestInput, branch: str) -> dict[str, Any]:
    return {
        "id": f"refs/heads/{branch}",
        "repository": {
            "slug": data.repository,
            "project": {"key": data.project},
        },
    }


async def create_pull_request(
    client: httpx.AsyncClient, data: CreatePullRequestInput
) -> dict[str, Any]:
    """create a pull request from `sourceBranch` into `targetBranch`

    Args:
        client: bitbucket REST client
        data: validated create arguments

    Returns:
        the created pull request as returned by bitbucket
    """
    payload: dict[str, Any] = {
        "title": data.title,
        "fromRef": _branch_ref(data, data.source_branch),
        "toRef": _branch_ref(data, data.target_branch),
    }
    if data.description is not None:
        payload["description"] = data.description
    if data.reviewers is not None:
        payload["reviewers"] = [{"user": {"name": name}} for name in data.reviewers]

    return await request_json(
        client, "POST", f"{data.repo_path}/pull-requests", json=payload
    )


async def get_pull_request(
    client: httpx.AsyncClient, pr: PullRequestIdentity
) -> dict[str, Any]:
    """get detailed information about a pull request"""
    return await request_json(client, "GET", pr.pull_request_path)


async def merge_pull_request(
    client: httpx.AsyncClient, data: MergePullRequestInput
) -> dict[str, Any]:
    """merge a pull request

    The version is always sent as -1, so bitbucket merges whatever the
    current version of the pull request is instead of rejecting a stale one.
    """
    payload: dict[str, Any] = {"version": ANY_VERSION, "strategy": data.strategy}
    if data.message is not None:
        payload["message"] = data.message

    return await request_json(
        client, "POST", f"{data.pull_request_path}/merge", json=payload
    )


async def decline_pull_request(
    client: httpx.AsyncClient, data: DeclinePullRequestInput
) -> dict[str, Any]:
    """decline a pull request, regardless of its current version"""
    payload: dict[str, Any] = {"version": ANY_VERSION}
    if data.message is not None:
        payload["message"] = data.message

    return await request_json(
        client, "POST", f"{data.pull_request_path}/decline", json=payload
    )


async def add_comment(
    client: httpx.AsyncClient, data: AddCommentInput
) -> dict[str, Any]:
    """add a comment, or a threaded reply when `parentId` is given"""
    payload: dict[str, Any] = {"text": data.text}
    if data.parent_id is not None:
        payload["parent"] = {"id": data.parent_id}

    return await request_json(
        client, "POST", f"{data.pull_request_path}/comments", json=payload
    )


async def get_diff(client: httpx.AsyncClient, data: GetDiffInput) -> str:
    """get the raw diff of a pull request"""
    return await request_text(
        client,
        f"{data.pull_request_path}/diff",
        params={"contextLines": data.context_lines},
    )


async def get_reviews(
    client: httpx.AsyncClient, pr: PullRequestIdentity
) -> list[dict[str, Any]]:
    """list approvals and reviews from the pull request's activity feed

    Args:
        client: bitbucket REST client
        pr: pull request to inspect

    Returns:
        activities whose action is APPROVED or REVIEWED, in feed order. The
        feed also carries comments, rescopes, merges etc., which are dropped.
    """
    response = await request_json(client, "GET", f"{pr.pull_request_path}/activities")
    return [
        activity
        for activity in (response or {}).get("values") or []
        if activity.get("action") in REVIEW_ACTIONS
    ]
