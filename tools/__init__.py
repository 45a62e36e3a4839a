"""Agent-facing tool surface for the roadmap store."""

from .roadmap_tools import (
    ROADMAP_TOOLS,
    describe_roadmap_tools,
    get_arguments_model,
    invoke_tool,
)

__all__ = [
    "ROADMAP_TOOLS",
    "describe_roadmap_tools",
    "get_arguments_model",
    "invoke_tool",
]
