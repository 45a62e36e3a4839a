"""Roadmap tools exposed to the agent layer.

Each tool is a RoadmapStore method: arguments come in as a plain dict,
enums by name, and the reply is always a string.
"""

import inspect
from functools import lru_cache
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError, create_model

from roadmap import RoadmapStore

# Tool name (== store method name) -> description shown to the model
ROADMAP_TOOLS: Dict[str, str] = {
    "initialize_roadmap": "Initialize a new roadmap with basic information",
    "update_status": "Update roadmap status",
    "get_summary": "Get roadmap summary with modules count and status",
    "add_module": "Add a new module to the roadmap",
    "update_module": "Update an existing module",
    "remove_module": "Remove a module from the roadmap",
    "get_all_modules": "Get list of all modules with basic info",
    "add_topic_to_module": "Add a topic to a specific module",
    "update_topic_confidence": "Update topic confidence score",
    "get_module_topics": "Get topics for a specific module",
    "add_concept_to_topic": "Add a concept to a specific topic",
    "get_topic_concepts": "Get concepts for a specific topic",
    "add_resource_to_module": "Add a learning resource to a module",
    "add_resources_from_text": "Adds learning resources to a specific module from **RESOURCE blocks",
    "get_module_resources": "Get resources for a specific module",
    "remove_resource_from_module": "Remove a resource from a module",
    "validate_module_resource_quality": "Validate that all resources in a module have proper URLs and titles",
    "get_modules_without_resources": "Get all modules that are missing resources",
    "validate_all_resource_urls": "Validate that all module resources have actual working URLs",
    "get_roadmap_analysis": "Get detailed roadmap analysis",
    "validate_roadmap_quality": (
        "Validates roadmap quality by checking that all modules have topics, "
        "all topics have key concepts, and all modules have resources"
    ),
    "get_topics_needing_concepts": "Gets topics that need key concepts added",
    "get_modules_needing_topics": "Gets modules that need topics added",
    "get_modules_needing_resources": "Gets modules that need resources added",
}


def _model_name(tool_name: str) -> str:
    return "".join(part.capitalize() for part in tool_name.split("_")) + "Arguments"


@lru_cache(maxsize=None)
def get_arguments_model(tool_name: str) -> Type[BaseModel]:
    """Pydantic model mirroring the store method's parameters."""
    signature = inspect.signature(getattr(RoadmapStore, tool_name))
    fields: Dict[str, Any] = {}
    for name, param in signature.parameters.items():
        if name == "self":
            continue
        annotation = Any if param.annotation is inspect.Parameter.empty else param.annotation
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[name] = (annotation, default)
    return create_model(_model_name(tool_name), **fields)


def describe_roadmap_tools() -> List[Dict[str, Any]]:
    """Tool definitions (name, description, JSON parameter schema) for function calling."""
    return [
        {
            "name": name,
            "description": description,
            "parameters": get_arguments_model(name).model_json_schema(),
        }
        for name, description in ROADMAP_TOOLS.items()
    ]


def invoke_tool(store: RoadmapStore, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
    """Validate arguments and run one tool against the store.

    Args:
        store: Store the tool operates on.
        tool_name: One of ROADMAP_TOOLS.
        arguments: Keyword arguments as decoded from the model's tool call.

    Returns:
        The operation's reply, or a message describing an unknown tool or bad arguments.
    """
    if tool_name not in ROADMAP_TOOLS:
        return f"Unknown tool '{tool_name}'. Available tools: {', '.join(ROADMAP_TOOLS)}"

    model = get_arguments_model(tool_name)
    try:
        validated = model.model_validate(arguments or {})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        return f"Invalid arguments for tool '{tool_name}': {problems}"

    kwargs = {name: getattr(validated, name) for name in model.model_fields}
    return getattr(store, tool_name)(**kwargs)
