"""Pydantic config model for the chat server.

ChatServerConfig — process-level settings, read from the environment
(``.env`` is loaded by the standalone entry point before this is built).
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field


class ChatServerConfig(BaseModel):
    """Server settings shared by the app factory and the entry point."""
    host: str = "0.0.0.0"
    port: int = 3000
    subscriber_queue_size: int = Field(default=1000, ge=1)
    """Pending events a websocket subscriber may buffer before it is disconnected."""
    ws_send_timeout: float = Field(default=5.0, gt=0)
    """Seconds a single websocket write may take before the connection is dropped."""
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_events: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ChatServerConfig":
        """Build the config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        values: dict = {}
        if env.get("HOST"):
            values["host"] = env["HOST"]
        if env.get("PORT"):
            values["port"] = int(env["PORT"])
        if env.get("SUBSCRIBER_QUEUE_SIZE"):
            values["subscriber_queue_size"] = int(env["SUBSCRIBER_QUEUE_SIZE"])
        if env.get("WS_SEND_TIMEOUT"):
            values["ws_send_timeout"] = float(env["WS_SEND_TIMEOUT"])
        if env.get("CORS_ORIGINS"):
            values["cors_origins"] = [o.strip() for o in env["CORS_ORIGINS"].split(",") if o.strip()]
        if "LOG_EVENTS" in env:
            values["log_events"] = env["LOG_EVENTS"] != "0"
        if env.get("LOG_LEVEL"):
            values["log_level"] = env["LOG_LEVEL"].upper()
        return cls(**values)
