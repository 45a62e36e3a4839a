"""Adapters between agent text output and roadmap contracts.

Pure functions: no store access, no side effects.
"""

from typing import List, Optional

from .roadmap_contracts import Resource, ResourceType

RESOURCE_BLOCK_MARKER = "**RESOURCE"

_FIELD_PREFIXES = {
    "- title:": "title",
    "- url:": "url",
    "- type:": "type",
    "- source:": "source",
    "- description:": "description",
}


def parse_resource_blocks(text: str) -> List[Resource]:
    """Parse resources from the block format the resource gathering agent emits.

    Expected shape (any number of blocks):

        **RESOURCE 1**
        - Title: Python Tutorial
        - URL: https://docs.python.org/3/tutorial/
        - Type: Tutorial
        - Source: python.org
        - Description: Official tutorial

    Blocks missing a title or URL are skipped. An unknown type keeps the
    default type.
    """
    resources = []
    for block in text.split(RESOURCE_BLOCK_MARKER):
        if "- title:" not in block.lower():
            continue
        resource = parse_resource_block(block)
        if resource is not None:
            resources.append(resource)
    return resources


def parse_resource_block(block: str) -> Optional[Resource]:
    """Parse one block; None unless both title and URL are present."""
    fields = {}
    for line in block.splitlines():
        stripped = line.strip()
        lowered = stripped.lower()
        for prefix, name in _FIELD_PREFIXES.items():
            if lowered.startswith(prefix):
                fields[name] = stripped[len(prefix):].strip()
                break

    if not fields.get("title") or not fields.get("url"):
        return None

    raw_type = fields.pop("type", None)
    resource = Resource(**fields)
    if raw_type:
        try:
            resource.type = ResourceType.parse(raw_type)
        except ValueError:
            pass
    return resource
