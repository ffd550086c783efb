"""textpatch-mcp: verified line-anchored file patching over MCP."""

__version__ = "0.1.0"
