"""Local development server."""

import os

import uvicorn


def main() -> None:
    """Serve the ASGI app with uvicorn."""
    uvicorn.run(
        "munch_log.api.asgi:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "local") == "local",
    )


if __name__ == "__main__":
    main()
