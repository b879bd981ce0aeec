"""advisor-mcp: MCP tool server for the advisor REST backend."""

__version__ = "0.1.0"
