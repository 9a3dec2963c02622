#!/usr/bin/env python3
"""Standalone chat app — run chat-lodge as an HTTP server.

    cd samples/chat
    poetry run python app.py

Starts on http://localhost:3000.

Environment variables:
    PORT            — Server port (default: 3000)
    HOST            — Bind address (default: 0.0.0.0)
    LOG_LEVEL       — Set to DEBUG to see every published event
"""
from chat_lodge.standalone import main

if __name__ == "__main__":
    main()
