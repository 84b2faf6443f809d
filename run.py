#!/usr/bin/env python3
"""
Run script for the call sentiment webhook
"""
import uvicorn

from callsentiment.config.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "callsentiment.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
