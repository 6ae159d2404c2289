"""Weightplan Server - Entry point.

Runs the MCP server with HTTP transport, next to plain routes for health
checks and snapshot export/import.
"""

import logging
import os

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route, Mount

from .shell.mcp_server import mcp, get_session


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ==================== Route Handlers ====================


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "healthy", "service": "weightplan"})


async def export_snapshot(request: Request) -> Response:
    """Download the full snapshot as a dated JSON document."""
    filename, document = get_session().export_document()
    return Response(
        document,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def import_snapshot(request: Request) -> JSONResponse:
    """Replace the full snapshot with an uploaded JSON document."""
    body = await request.body()

    if not get_session().import_document(body):
        return JSONResponse({"error": "Import failed."}, status_code=400)

    return JSONResponse({"success": True})


# ==================== Create ASGI App ====================


def create_app() -> Starlette:
    """Create the Starlette application with MCP at root.

    The MCP streamable_http_app() handles /mcp/ internally when mounted at root.
    We use its lifespan context to ensure proper initialization.
    """
    mcp_app = mcp.streamable_http_app()

    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/export", export_snapshot, methods=["GET"]),
        Route("/import", import_snapshot, methods=["POST"]),
        Mount("/", app=mcp_app),
    ]

    allowed_origins = os.environ.get("ALLOWED_ORIGINS", "http://localhost:5173").split(",")

    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=allowed_origins,
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            ),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )

    return app


app = create_app()


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.info("Starting Weightplan server on %s:%d", host, port)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
