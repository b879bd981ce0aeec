"""HTTP app serving the MCP transports."""
