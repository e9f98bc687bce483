"""
Development server entry point

Usage:
    # Development with auto-reload
    uvicorn app:app --reload

    # With settings from config.toml
    python app.py
"""

import uvicorn

from seizuretrack.app import app
from seizuretrack.config.loader import get_config
from seizuretrack.core.logger import get_logger

logger = get_logger(__name__)


if __name__ == "__main__":
    # Run with uvicorn when executed directly
    config = get_config()
    host = config.get('server.host', '127.0.0.1')
    port = config.get('server.port', 8000)
    debug = config.get('server.debug', False)

    logger.info(f"Starting server at http://{host}:{port}")

    uvicorn.run(
        "app:app" if debug else app,
        host=host,
        port=port,
        reload=debug,
        log_level="debug" if debug else "info"
    )
