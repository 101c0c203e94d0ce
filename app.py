import json
import logging
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from store import InvalidTaskText, StoreWriteError, TaskNotFound, TaskStore

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE",
    "Access-Control-Allow-Headers": "Content-Type",
}

STATIC_ASSETS = {
    "/":           ("index.html", "text/html"),
    "/index.html": ("index.html", "text/html"),
    "/style.css":  ("style.css", "text/css"),
    "/app.js":     ("app.js", "application/javascript"),
}

app = FastAPI()


def get_store() -> TaskStore:
    return TaskStore(config.TODOS_FILE)


Store = Annotated[TaskStore, Depends(get_store)]


def error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.middleware("http")
async def cors(request: Request, call_next):
    # Preflight never reaches the router, so any path answers OPTIONS.
    if request.method == "OPTIONS":
        response = Response(status_code=200)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(TaskNotFound)
def todo_not_found(request: Request, exc: TaskNotFound):
    return error(status.HTTP_404_NOT_FOUND, "Todo not found")


@app.exception_handler(InvalidTaskText)
def invalid_text(request: Request, exc: InvalidTaskText):
    return error(status.HTTP_400_BAD_REQUEST, "Text is required")


@app.exception_handler(StoreWriteError)
def write_failed(request: Request, exc: StoreWriteError):
    return error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save todos")


@app.exception_handler(StarletteHTTPException)
def plain_not_found(request: Request, exc: StarletteHTTPException):
    # Unmatched paths and methods both answer like a missing page.
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return PlainTextResponse("404 - Not Found", status_code=status.HTTP_404_NOT_FOUND)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.get("/api/todos")
def list_todos(store: Store):
    return [t.to_json() for t in store.list()]


@app.post("/api/todos", status_code=201)
async def add_todo(request: Request, store: Store):
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        return error(status.HTTP_400_BAD_REQUEST, "Invalid JSON")
    if payload is None:
        return error(status.HTTP_400_BAD_REQUEST, "Invalid JSON")
    text = payload.get("text") if isinstance(payload, dict) else None
    if not isinstance(text, str) or not text.strip():
        return error(status.HTTP_400_BAD_REQUEST, "Text is required")
    # Blocking file I/O and the store lock stay off the event loop.
    task = await run_in_threadpool(store.add, text)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=task.to_json())


@app.put("/api/todos/{todo_id:int}")
def complete_todo(todo_id: int, store: Store):
    return store.complete(todo_id).to_json()


@app.delete("/api/todos/{todo_id:int}")
def delete_todo(todo_id: int, store: Store):
    return store.remove(todo_id).to_json()


def static_asset(request: Request):
    name, media_type = STATIC_ASSETS[request.url.path]
    path = config.STATIC_DIR / name
    if not path.is_file():
        return PlainTextResponse("404 - File not found", status_code=status.HTTP_404_NOT_FOUND)
    return FileResponse(path, media_type=media_type)


for _path in STATIC_ASSETS:
    app.add_api_route(_path, static_asset, methods=["GET"], include_in_schema=False)
