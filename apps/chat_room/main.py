"""HTTP entry point for the chat room.

The routes are thin: they pull the body, the ``user`` header and the query
string out of the request and hand them to :class:`apps.chat_room.ChatRoom`.
Domain errors are turned into status codes by the exception handlers
registered in :func:`create_app`.

The store is opened and the reaper started by the application lifespan, and
both are shut down with it.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, FastAPI, Header, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apps.chat_room import ChatRoom
from apps.reaper import Reaper
from lib.config.chat_room_loader import RoomConfig, load_room_config
from lib.contracts.errors import ConflictError, NotFoundError, StoreError, ValidationError
from lib.store import ChatStore, open_store
from lib.telemetry.logger import get_logger
from lib.utils.clock import Clock, SystemClock

log = get_logger(__name__)

router = APIRouter()


def _room(request: Request) -> ChatRoom:
    return request.app.state.room


async def _json_body(request: Request) -> Any:
    """Return the decoded JSON body, or ``None`` if it is absent or malformed."""

    try:
        return await request.json()
    except ValueError:
        return None


@router.post("/participants", status_code=201)
async def register_participant(request: Request) -> Response:
    await _room(request).register(await _json_body(request))
    return Response(status_code=201)


@router.get("/participants")
async def list_participants(request: Request) -> List[Dict[str, Any]]:
    participants = await _room(request).participants()
    return [p.model_dump(by_alias=True) for p in participants]


@router.post("/messages", status_code=201)
async def post_message(request: Request, user: Optional[str] = Header(None)) -> Response:
    await _room(request).post(user, await _json_body(request))
    return Response(status_code=201)


@router.get("/messages")
async def list_messages(
    request: Request,
    limit: Optional[str] = None,
    user: Optional[str] = Header(None),
) -> List[Dict[str, Any]]:
    messages = await _room(request).messages(user, limit)
    return [m.model_dump(by_alias=True) for m in messages]


@router.post("/status")
async def heartbeat(request: Request, user: Optional[str] = Header(None)) -> Response:
    await _room(request).heartbeat(user)
    return Response(status_code=200)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content=exc.messages)


async def _conflict_error(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def _not_found_error(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    log.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def create_app(
    config: Optional[RoomConfig] = None,
    store: Optional[ChatStore] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Build the FastAPI application.

    ``store`` and ``clock`` default to what ``config`` describes and to the
    system clock; tests pass their own.
    """

    config = config or load_room_config()
    store = store or open_store(config.store_url)
    clock = clock or SystemClock()
    room = ChatRoom(store=store, clock=clock)
    reaper = Reaper(
        store=store,
        clock=clock,
        interval=config.reaper_interval_seconds,
        inactive_after=config.inactive_after_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.connect()
        if config.reaper_enabled:
            reaper.start()
        try:
            yield
        finally:
            await reaper.stop()
            await store.close()

    app = FastAPI(title="Chat Room", lifespan=lifespan)
    app.state.config = config
    app.state.store = store
    app.state.room = room
    app.state.reaper = reaper

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(ConflictError, _conflict_error)
    app.add_exception_handler(NotFoundError, _not_found_error)
    app.add_exception_handler(StoreError, _store_error)
    app.include_router(router)
    return app


# .env and logging are set up by __main__
app = create_app()
