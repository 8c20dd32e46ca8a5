"""
API routes for the godo server.

Handlers that touch shared state are plain functions, so each request runs
on its own worker thread; the store and counter do their own locking.
"""

import json
import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException

from godo import __version__
from godo.store import ServerState, Todo

logger = logging.getLogger(__name__)

router = APIRouter()

ECHO_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


# =============================================================================
# Request Models
# =============================================================================

class CreateTodoRequest(BaseModel):
    """Body of a create call."""
    list_name: Optional[str] = Field(default=None, alias="list")
    todo: str


async def parse_create_body(request: Request) -> CreateTodoRequest:
    """Decode the body as JSON whatever its Content-Type says."""
    body = (await request.body()).decode("utf-8", errors="replace")
    try:
        return CreateTodoRequest.model_validate_json(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False), body=body) from e


def get_state(request: Request) -> ServerState:
    """Shared state of the app serving this request."""
    return request.app.state.godo


def quote(value: str) -> str:
    """Double-quoted, escaped string literal."""
    return json.dumps(value, ensure_ascii=False)


def quote_all(values: List[str]) -> str:
    return "[" + " ".join(quote(v) for v in values) + "]"


def canonical_header(key: str) -> str:
    """content-type -> Content-Type"""
    return "-".join(part.capitalize() for part in key.split("-"))


# =============================================================================
# Health Check
# =============================================================================

@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": __version__
    }


# =============================================================================
# Counter and Debugging
# =============================================================================

@router.get("/count", response_class=PlainTextResponse)
def count(state: ServerState = Depends(get_state)):
    """Number of requests served by the root handler."""
    return f"Count {state.counter.value}\n"


@router.api_route("/request", methods=ECHO_METHODS, response_class=PlainTextResponse)
async def echo_request(request: Request):
    """Dump the request line, headers, host, remote address and form fields."""
    url = request.url.path
    if request.url.query:
        url += "?" + request.url.query
    proto = "HTTP/" + request.scope.get("http_version", "1.1")

    lines = [f"{request.method} {url} {proto}"]

    headers: Dict[str, List[str]] = {}
    for key, value in request.headers.items():
        headers.setdefault(canonical_header(key), []).append(value)
    for key, values in headers.items():
        lines.append(f"Header[{quote(key)}] = {quote_all(values)}")

    lines.append(f"Host = {quote(request.headers.get('host', ''))}")
    remote = f"{request.client.host}:{request.client.port}" if request.client else ""
    lines.append(f"RemoteAddr = {quote(remote)}")

    # Body fields come before query fields
    form: Dict[str, List[str]] = {}
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        try:
            body_form = await request.form()
        except (HTTPException, ValueError) as e:
            logger.warning(f"Could not parse form body: {e}")
        else:
            for key, value in body_form.multi_items():
                if isinstance(value, str):
                    form.setdefault(key, []).append(value)
    for key, value in request.query_params.multi_items():
        form.setdefault(key, []).append(value)
    for key, values in form.items():
        lines.append(f"Form[{quote(key)}] = {quote_all(values)}")

    return "\n".join(lines) + "\n"


# =============================================================================
# Todos
# =============================================================================

@router.post("/create", response_model=Todo)
def create_todo(
    request: Request,
    payload: CreateTodoRequest = Depends(parse_create_body),
    state: ServerState = Depends(get_state)
):
    """Add a todo to a list, creating the list if needed."""
    list_name = payload.list_name
    if list_name is None:
        list_name = request.app.state.settings.default_list
    return state.store.create(list_name, payload.todo)


@router.get("/todos", response_model=Dict[str, List[Todo]])
def list_todos(state: ServerState = Depends(get_state)):
    """Every list with all of its todos."""
    return state.store.snapshot()


# =============================================================================
# Root (catch-all, must stay last)
# =============================================================================

@router.api_route("/{path:path}", methods=ECHO_METHODS, response_class=PlainTextResponse)
def root(request: Request, state: ServerState = Depends(get_state)):
    """Count the hit and echo the requested path."""
    state.counter.increment()
    return f"URL.Path = {quote(request.url.path)}\n"
