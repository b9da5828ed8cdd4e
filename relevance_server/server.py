#!/usr/bin/env python3
"""
Content Relevance server: entrypoint for uvicorn relevance_server.server:app.
"""

from .app import app

if __name__ == "__main__":
    import uvicorn

    from .config import get_config

    config = get_config()
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
