from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Literal

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import FunctionTool
from mcp.types import TextContent

from ..api import ApiFunction, get_api_functions

logger = logging.getLogger(__name__)

SERVER_NAME = "calendar-bridge"
INSTRUCTIONS = (
    "Calendar tools backed by the local calendar bridge. Dates can be given in casual "
    "forms; failures report a kind (DateFormat, Network, NotFound, Unknown) and, for "
    "date problems, a suggested fix."
)

Transport = Literal["stdio", "http"]


def _as_mcp_handler(api_function: ApiFunction) -> Callable[..., Any]:
    """Adapt an envelope-returning tool to fastmcp's content/error contract."""

    func = api_function.func

    @functools.wraps(func)
    async def handler(**arguments: Any) -> list[TextContent]:
        envelope = await func(**arguments)
        if envelope.is_error:
            raise ToolError(envelope.text)
        return [TextContent(type="text", text=envelope.text)]

    handler.__signature__ = api_function.signature.replace(return_annotation=list)  # type: ignore[attr-defined]
    handler.__annotations__ = {**func.__annotations__, "return": list}
    return handler


def build_mcp_server() -> FastMCP:
    tools = []
    for spec in get_api_functions():
        logger.debug("Registering MCP tool: %s", spec.name)
        tool = FunctionTool.from_function(
            _as_mcp_handler(spec),
            name=spec.name,
            description=spec.description,
            tags=set(spec.tags),
            output_schema=None,
        )
        tools.append(tool)
    return FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS, tools=tools)


def run_mcp_server(transport: Transport = "stdio", host: str = "127.0.0.1", port: int = 8765) -> None:
    server = build_mcp_server()
    if transport == "stdio":
        server.run()
    else:
        server.run(transport="http", host=host, port=port)
