"""Request pipeline (ASGI side) and the uvicorn transport that feeds it."""
