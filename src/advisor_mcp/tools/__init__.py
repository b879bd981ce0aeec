"""Tool definitions, registry, and the advisor tool set.

Tools are plain :class:`ToolDefinition` records: a pydantic argument
model plus an async handler. The registry validates arguments against
the model before any handler runs.
"""
