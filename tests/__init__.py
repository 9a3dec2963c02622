"""Test package for chat-lodge."""
