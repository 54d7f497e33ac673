"""
Health check server.

Minimal HTTP endpoint for hosting platforms that expect the process to
listen on a port.
"""

import asyncio

from aiohttp import web
from loguru import logger

STATUS_PAGE = """<!DOCTYPE html>
<html>
<head><title>Copperx Telegram Bot</title></head>
<body>
<h1>Copperx Telegram Bot</h1>
<p>Status: {status}</p>
</body>
</html>
"""


async def health_handler(request: web.Request) -> web.Response:
    """
    Health check endpoint.

    Returns:
        JSON response with bot status
    """
    polling = request.app.get("polling", True)
    return web.json_response(
        {
            "status": "ok",
            "message": (
                "Copperx bot is running"
                if polling
                else "Copperx bot is running (standby instance, not polling)"
            ),
        }
    )


async def index_handler(request: web.Request) -> web.Response:
    """Human-readable status page."""
    polling = request.app.get("polling", True)
    status = "running" if polling else "standby"
    return web.Response(text=STATUS_PAGE.format(status=status), content_type="text/html")


def create_health_app(polling: bool = True) -> web.Application:
    """Build the aiohttp application."""
    app = web.Application()
    app["polling"] = polling
    app.router.add_get("/health", health_handler)
    app.router.add_get("/", index_handler)
    return app


async def start_health_server(
    host: str = "0.0.0.0",
    port: int = 3001,
    polling: bool = True,
) -> web.AppRunner:
    """
    Start health check server.

    Args:
        host: Host to bind to
        port: Port to bind to
        polling: Whether this instance polls Telegram

    Returns:
        AppRunner for cleanup
    """
    runner = web.AppRunner(create_health_app(polling))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Health check server started on {host}:{port}")
    logger.info(f"  - Health: http://{host}:{port}/health")
    return runner


async def stop_health_server(runner: web.AppRunner, timeout: int = 5) -> None:
    """
    Stop health check server gracefully.

    Args:
        runner: AppRunner to cleanup
        timeout: Maximum time to wait for cleanup in seconds
    """
    logger.info("Stopping health check server...")
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("Health check server stopped successfully")
    except TimeoutError:
        logger.warning(f"Health check server cleanup timed out after {timeout}s")
