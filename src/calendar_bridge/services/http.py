from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from hypercorn.asyncio import serve
from hypercorn.config import Config
from pydantic import BaseModel, Field

from ..api import ApiFunction, call_api, get_api_functions

logger = logging.getLogger(__name__)

app = FastAPI(title="Calendar Bridge Tools", version="1.0.0")


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


def _serialize_api_function(api_function: ApiFunction) -> Dict[str, Any]:
    return {
        "name": api_function.name,
        "description": api_function.description,
        "category": api_function.category,
        "tags": list(api_function.tags),
        "parameters": api_function.parameter_schema,
    }


@app.get("/api/functions")
async def list_functions() -> Dict[str, Any]:
    return {"functions": [_serialize_api_function(spec) for spec in get_api_functions()]}


@app.post("/api/functions/{name}")
async def invoke_function(name: str, request: ApiCallRequest) -> Dict[str, Any]:
    try:
        envelope = await call_api(name, **request.arguments)
    except KeyError as exc:
        logger.warning("API function not found: %s", name)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    logger.debug("API function %s returned isError=%s", name, envelope.is_error)
    return {"name": name, "result": envelope.to_wire()}


async def _serve(config: Config) -> None:
    await serve(app, config)


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    config = Config()
    config.bind = [f"{host}:{port}"]
    asyncio.run(_serve(config))
