#!/usr/bin/env python3
"""
Startup script for the Taskflow backend
This script starts the FastAPI server with proper configuration
"""

import logging

import uvicorn

from taskflow.config import settings

logger = logging.getLogger(__name__)

def main():
    logging.basicConfig(level=logging.INFO)
    logger.info(f"Starting Taskflow backend on {settings.HOST}:{settings.PORT} (reload={settings.RELOAD})")

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )

if __name__ == "__main__":
    main()
