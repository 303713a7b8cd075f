"""Server internals — ASGI request handling and the listener lifecycle."""
