from __future__ import annotations

from typing import Any, Dict

from .adapter import bridge_tool
from .registry import get_api_functions, register_api


@register_api(
    "listAvailableTools",
    description="List all calendar tools with descriptions, categories, and parameters.",
    category="meta",
    tags=("tools", "metadata"),
)
@bridge_tool("list available tools")
async def list_available_tools() -> Dict[str, Any]:
    tools = [
        {
            "name": func.name,
            "description": func.description,
            "category": func.category,
            "tags": list(func.tags),
            "parameters": func.parameter_schema,
        }
        for func in sorted(get_api_functions(), key=lambda item: item.name)
    ]
    return {"tools": tools}
