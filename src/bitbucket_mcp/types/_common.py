"""shared types and validators"""

import json
from typing import Annotated, Any

from mcp.types import TextContent
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
)

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


def whole_number(v: Any) -> Any:
    """accept JSON numbers like 1.0 for integer fields; 1.5 still fails"""
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return v


# ids and counts arrive as JSON numbers
JsonInt = Annotated[int, BeforeValidator(whole_number)]


class RepositoryRef(BaseModel):
    """project key + repository slug, after default-project resolution"""

    model_config = ConfigDict(strict=True, populate_by_name=True, frozen=True)

    project: NonEmptyStr = Field(description="Bitbucket project key")
    repository: NonEmptyStr = Field(description="Repository slug")

    @property
    def repo_path(self) -> str:
        return f"/projects/{self.project}/repos/{self.repository}"


class PullRequestIdentity(RepositoryRef):
    """a single pull request in a repository"""

    pr_id: JsonInt = Field(alias="prId", description="Pull request ID")

    @property
    def pull_request_path(self) -> str:
        return f"{self.repo_path}/pull-requests/{self.pr_id}"


def json_content(data: Any) -> list[TextContent]:
    """render a decoded response body as a single pretty-printed JSON block"""
    return [
        TextContent(type="text", text=json.dumps(data, indent=2, ensure_ascii=False))
    ]


def text_content(text: str) -> list[TextContent]:
    """wrap raw text (e.g. a diff) as a single block, unmodified"""
    return [TextContent(type="text", text=text)]
