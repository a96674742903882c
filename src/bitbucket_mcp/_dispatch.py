"""tool catalog and request dispatcher

The dispatcher turns a tool name plus an untyped argument mapping into one
Bitbucket call:

1. record the call on the event sink
2. resolve the project (argument, else the configured default)
3. look the tool up in the catalog
4. validate the arguments against the tool's input model
5. run the handler, translating HTTP failures into `BitbucketApiError`
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import httpx
from mcp.types import TextContent
from pydantic import BaseModel, ValidationError

from bitbucket_mcp import _bitbucket
from bitbucket_mcp._logging import EventSink, LoggingSink
from bitbucket_mcp.exceptions import (
    BitbucketApiError,
    InvalidParamsError,
    MethodNotFoundError,
)
from bitbucket_mcp.settings import Settings
from bitbucket_mcp.types import (
    AddCommentInput,
    CreatePullRequestInput,
    DeclinePullRequestInput,
    GetDiffInput,
    MergePullRequestInput,
    PullRequestIdentity,
    json_content,
    text_content,
)

logger = logging.getLogger("bitbucket-mcp.dispatch")

PROJECT_REQUIRED = (
    "Project must be provided either as a parameter or through "
    "BITBUCKET_DEFAULT_PROJECT environment variable"
)

Handler = Callable[[httpx.AsyncClient, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolSpec:
    """catalog entry: what a tool is called, what it takes, what runs it"""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Handler

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON schema advertised to callers

        `project` is optional on the wire because the dispatcher fills it in
        from the configured default before validation.
        """
        schema = self.input_model.model_json_schema(by_alias=True)
        schema["required"] = [f for f in schema.get("required", []) if f != "project"]
        return schema

    @property
    def required(self) -> frozenset[str]:
        return frozenset(self.input_schema["required"])


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        "create_pull_request",
        "Create a new pull request",
        CreatePullRequestInput,
        _bitbucket.create_pull_request,
    ),
    ToolSpec(
        "get_pull_request",
        "Get pull request details",
        PullRequestIdentity,
        _bitbucket.get_pull_request,
    ),
    ToolSpec(
        "merge_pull_request",
        "Merge a pull request",
        MergePullRequestInput,
        _bitbucket.merge_pull_request,
    ),
    ToolSpec(
        "decline_pull_request",
        "Decline a pull request",
        DeclinePullRequestInput,
        _bitbucket.decline_pull_request,
    ),
    ToolSpec(
        "add_comment",
        "Add a comment to a pull request",
        AddCommentInput,
        _bitbucket.add_comment,
    ),
    ToolSpec(
        "get_diff",
        "Get pull request diff",
        GetDiffInput,
        _bitbucket.get_diff,
    ),
    ToolSpec(
        "get_reviews",
        "Get pull request reviews",
        PullRequestIdentity,
        _bitbucket.get_reviews,
    ),
)

TOOLS_BY_NAME: Mapping[str, ToolSpec] = MappingProxyType({t.name: t for t in TOOLS})


def resolve_project(
    arguments: Mapping[str, Any], default_project: str | None
) -> Any | None:
    """project argument if given, otherwise the configured default"""
    project = arguments.get("project")
    if project is None:
        return default_project
    return project


def _describe_validation_error(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc']) or 'input'}: {e['msg']}"
        for e in error.errors()
    )


class Dispatcher:
    """routes tool calls to bitbucket operations

    Holds only read-only state (the HTTP client and the default project), so
    any number of calls can be in flight at once.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        default_project: str | None = None,
        sink: EventSink | None = None,
    ) -> None:
        self.client = client
        self.default_project = default_project
        self.sink: EventSink = sink or LoggingSink()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
        sink: EventSink | None = None,
    ) -> "Dispatcher":
        return cls(
            _bitbucket.create_http_client(settings, transport),
            default_project=settings.bitbucket_default_project,
            sink=sink,
        )

    def list_tools(self) -> tuple[ToolSpec, ...]:
        return TOOLS

    async def call(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> list[TextContent]:
        """run one tool call

        Raises:
            InvalidParamsError: no project could be resolved, or the arguments
                do not match the tool's input model
            MethodNotFoundError: `name` is not in the catalog
            BitbucketApiError: the bitbucket request failed
        """
        arguments = dict(arguments or {})
        self._notify(self.sink.record_call, name, arguments)
        try:
            return await self._call(name, arguments)
        except Exception as e:
            self._notify(self.sink.record_failure, name, e)
            raise

    async def _call(self, name: str, arguments: dict[str, Any]) -> list[TextContent]:
        project = resolve_project(arguments, self.default_project)
        if not project:
            raise InvalidParamsError(PROJECT_REQUIRED)

        spec = TOOLS_BY_NAME.get(name)
        if spec is None:
            raise MethodNotFoundError(f"Unknown tool: {name}")

        try:
            params = spec.input_model.model_validate({**arguments, "project": project})
        except ValidationError as e:
            raise InvalidParamsError(
                f"Invalid {name} input parameters: {_describe_validation_error(e)}"
            ) from e

        try:
            payload = await spec.handler(self.client, params)
        except httpx.HTTPError as e:
            raise BitbucketApiError(
                f"Bitbucket API error: {_bitbucket.api_error_message(e)}"
            ) from e

        if isinstance(payload, str):
            return text_content(payload)
        return json_content(payload)

    def _notify(self, record: Callable[..., None], *args: Any) -> None:
        # the sink is observability only and must not affect the call
        try:
            record(*args)
        except Exception:
            logger.exception("event sink failed")

    async def aclose(self) -> None:
        await self.client.aclose()
