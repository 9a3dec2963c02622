"""Standalone chat server — run chat-lodge as a plain HTTP service.

Usage::

    poetry run chat-lodge

    # Custom port / bind address:
    PORT=9000 poetry run chat-lodge
    HOST=127.0.0.1 poetry run chat-lodge

Environment variables:
    HOST                  — Bind address (default: 0.0.0.0)
    PORT                  — Server port (default: 3000)
    SUBSCRIBER_QUEUE_SIZE — Events buffered per websocket before it is dropped (default: 1000)
    WS_SEND_TIMEOUT       — Seconds allowed for one websocket write (default: 5)
    CORS_ORIGINS          — Comma separated allowed origins (default: *)
    LOG_EVENTS            — Set to 0 to disable the event logger (default: 1)
    LOG_LEVEL             — Root log level (default: INFO)

Loads .env from the current working directory or any parent directory.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .chat_config import ChatServerConfig
from .hub import ChatHub, log_events
from .server import build_http_router, register_error_handlers

logger = logging.getLogger(__name__)


# ── FastAPI app factory ──────────────────────────────────────────

def create_app(config: Optional[ChatServerConfig] = None, hub: Optional[ChatHub] = None) -> FastAPI:
    """Create the FastAPI application around one ``ChatHub``.

    The hub lives as long as the app; it is exposed as ``app.state.hub``.
    Also called by uvicorn via the factory=True flag, in which case the
    config comes from the environment.
    """
    if config is None:
        from dotenv import load_dotenv, find_dotenv
        load_dotenv(find_dotenv(usecwd=True))
        config = ChatServerConfig.from_env()
    if hub is None:
        hub = ChatHub(max_queue_size=config.subscriber_queue_size)

    @asynccontextmanager
    async def lifespan(_a):
        task = None
        if config.log_events:
            task = asyncio.create_task(log_events(hub))
        yield
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    _app = FastAPI(title="chat-lodge", docs_url=None, redoc_url=None, lifespan=lifespan)
    _app.state.hub = hub
    _app.state.config = config

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(_app)
    _app.include_router(build_http_router(hub, send_timeout=config.ws_send_timeout))
    return _app


# ── Entry point ──────────────────────────────────────────────────

def main():
    """Load .env, configure logging, and start the server."""
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv(usecwd=True))

    import uvicorn

    config = ChatServerConfig.from_env()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )

    print(f"\n  chat-lodge → http://localhost:{config.port}\n")
    uvicorn.run(
        "chat_lodge.standalone:create_app",
        factory=True,
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    main()
