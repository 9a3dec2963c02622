"""HTTP and websocket integration for the chat hub.

Host apps call ``build_http_router(hub)`` and ``register_error_handlers(app)``
once at startup. Every route is a thin translation onto a ``ChatHub`` call.
"""

import asyncio
import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.websockets import WebSocket, WebSocketDisconnect

from .chat_errors import ChatError
from .chat_models import (
    MessageSendRequest, MessageSendResponse, MessagesListResponse,
    SignInRequest, SignInResponse, UsersListResponse, event_to_json,
)
from .hub import ChatHub, Subscriber

logger = logging.getLogger(__name__)

# API path constants
API_SIGNIN = "/signin"
API_USERS = "/users"
API_MESSAGES = "/messages"
API_WS = "/ws"

ERROR_CODE = 42

DEFAULT_SEND_TIMEOUT = 5.0

CLOSE_POLICY_VIOLATION = 1008
CLOSE_INTERNAL_ERROR = 1011


def error_body(message: str, status_code: int) -> dict:
    """JSON body returned for every chat error."""
    return {"error": {"message": message, "code": ERROR_CODE, "statusCode": status_code}}


async def chat_error_handler(_request: Request, exc: ChatError) -> JSONResponse:
    logger.info(f"[HTTP] Rejected request: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.status_code))


def register_error_handlers(app: FastAPI) -> None:
    """Map ``ChatError`` subclasses onto their HTTP status codes."""
    app.add_exception_handler(ChatError, chat_error_handler)


async def _forward_events(ws: WebSocket, subscriber: Subscriber, send_timeout: float) -> None:
    """Write every event of ``subscriber`` to the socket, in order."""
    async for event in subscriber:
        await asyncio.wait_for(ws.send_json(event_to_json(event)), timeout=send_timeout)


async def _drain_inbound(ws: WebSocket) -> None:
    """Consume client frames until the client disconnects."""
    while True:
        message = await ws.receive()
        if message["type"] == "websocket.disconnect":
            return
        logger.debug("[WS] Ignoring inbound frame, the event stream is server-to-client only")


def _log_task_failure(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        exc = task.exception()
        logger.debug(f"[WS] Connection task ended with {type(exc).__name__}: {exc}")


def build_http_router(hub: ChatHub, *, send_timeout: float = DEFAULT_SEND_TIMEOUT) -> APIRouter:
    """Build the FastAPI APIRouter with the REST endpoints and the event stream."""
    router = APIRouter()

    # ---- Users ----

    @router.post(API_SIGNIN, response_model=SignInResponse)
    async def signin(request: SignInRequest):
        user = hub.sign_in(request.user)
        return SignInResponse(user=user.user)

    @router.get(API_USERS, response_model=UsersListResponse)
    async def users_list():
        return UsersListResponse(users=hub.list_users())

    # ---- Messages ----

    @router.post(API_MESSAGES, response_model=MessageSendResponse)
    async def message_send(request: MessageSendRequest):
        index = hub.send(request.user, request.message)
        return MessageSendResponse(index=index)

    @router.get(API_MESSAGES, response_model=MessagesListResponse)
    async def messages_list():
        return MessagesListResponse(messages=hub.list_messages())

    # ---- WebSocket event stream ----

    @router.websocket(API_WS)
    async def websocket_events(ws: WebSocket):
        """Stream every event committed after the connection opened."""
        # registered before the handshake completes
        subscriber = hub.subscribe()
        tasks: list[asyncio.Task] = []
        try:
            await ws.accept()
            logger.info(f"[WS] Client connected (subscriber {subscriber.id})")

            sender = asyncio.create_task(_forward_events(ws, subscriber, send_timeout))
            receiver = asyncio.create_task(_drain_inbound(ws))
            closed = asyncio.create_task(subscriber.wait_closed())
            tasks = [sender, receiver, closed]
            for task in tasks:
                task.add_done_callback(_log_task_failure)
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)

            if receiver in done:
                logger.info(f"[WS] Client disconnected (subscriber {subscriber.id})")
                return

            failure = sender.exception() if sender in done else None
            sender.cancel()
            receiver.cancel()
            if subscriber.dropped:
                logger.warning(f"[WS] Subscriber {subscriber.id} fell behind, closing connection")
                code = CLOSE_POLICY_VIOLATION
            elif failure is not None:
                logger.warning(f"[WS] Send to subscriber {subscriber.id} failed: "
                               f"{type(failure).__name__}: {failure}")
                code = CLOSE_INTERNAL_ERROR
            else:
                logger.info(f"[WS] Subscriber {subscriber.id} closed, ending connection")
                code = CLOSE_INTERNAL_ERROR
            try:
                await asyncio.wait_for(ws.close(code=code), timeout=send_timeout)
            except (RuntimeError, asyncio.TimeoutError) as e:
                logger.debug(f"[WS] Close after send failure: {e}")
        except WebSocketDisconnect:
            logger.info(f"[WS] Client disconnected (subscriber {subscriber.id})")
        finally:
            # must not await: the handler may already be cancelled
            hub.unsubscribe(subscriber)
            for task in tasks:
                task.cancel()

    return router
