"""errors surfaced to MCP clients

Every tool failure the dispatcher classifies is a `ToolError`, so FastMCP
hands the message back to the client instead of masking it. The text that
reaches the client starts with the error kind in brackets, e.g.
`[invalid_params] Project must be provided ...`, so callers can tell the
kinds apart without parsing the rest. The JSON-RPC code is kept on the
exception for callers that speak the low-level protocol.
"""

from typing import ClassVar

from fastmcp.exceptions import ToolError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData


class BitbucketToolError(ToolError):
    """base class for classified tool failures"""

    code: ClassVar[int] = INTERNAL_ERROR
    kind: ClassVar[str] = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(f"[{self.kind}] {message}")
        self.message = message

    def to_error_data(self) -> ErrorData:
        return ErrorData(code=self.code, message=self.message, data={"kind": self.kind})


class InvalidParamsError(BitbucketToolError):
    """arguments are missing or have the wrong shape"""

    code = INVALID_PARAMS
    kind = "invalid_params"


class MethodNotFoundError(BitbucketToolError):
    """tool name is not in the catalog"""

    code = METHOD_NOT_FOUND
    kind = "method_not_found"


class BitbucketApiError(BitbucketToolError):
    """the Bitbucket REST call failed (HTTP status, transport or timeout)"""

    code = INTERNAL_ERROR
    kind = "internal_error"
