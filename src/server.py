"""
In-process server control
Starts and stops the API on the running event loop, bound to a chosen database.
"""

import asyncio
import logging
from typing import Optional

import uvicorn

from app import app
from config.settings import PORT

logger = logging.getLogger(__name__)

_server: Optional[uvicorn.Server] = None
_server_task: Optional[asyncio.Task] = None


async def run_server(
    database_url: Optional[str] = None,
    host: str = "127.0.0.1",
    port: int = PORT,
    startup_timeout: float = 30.0
) -> str:
    """
    Start the API server as a task on the current event loop

    Args:
        database_url: Database the server binds to (defaults to DATABASE_URL)
        host: Interface to bind
        port: Port to bind; 0 picks a free port
        startup_timeout: Seconds to wait for the server to accept connections

    Returns:
        Base URL of the running server
    """
    global _server, _server_task

    if _server is not None:
        raise RuntimeError("Server is already running")

    app.state.database_url = database_url
    config = uvicorn.Config(app, host=host, port=port, lifespan="on", log_level="info")
    server = uvicorn.Server(config)
    task = asyncio.create_task(server.serve())

    loop = asyncio.get_running_loop()
    deadline = loop.time() + startup_timeout
    while not server.started:
        if task.done():
            # serve() returns early when lifespan startup fails
            await task
            raise RuntimeError("Server failed to start - check database connectivity")
        if loop.time() > deadline:
            server.should_exit = True
            await task
            raise RuntimeError(f"Server not ready after {startup_timeout}s")
        await asyncio.sleep(0.05)

    _server, _server_task = server, task
    bound_port = server.servers[0].sockets[0].getsockname()[1]
    base_url = f"http://{host}:{bound_port}"
    logger.info(f"Blog Posts API running at {base_url}")
    return base_url


async def close_server():
    """Stop the server started by run_server()"""
    global _server, _server_task

    if _server is None:
        return

    logger.info("Closing Blog Posts API server")
    _server.should_exit = True
    await _server_task
    _server, _server_task = None, None
    app.state.database_url = None
