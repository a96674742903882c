"""bitbucket server MCP server"""

try:
    from importlib.metadata import version

    __version__ = version("bitbucket-server-mcp")
except Exception:
    __version__ = "0.0.0"
