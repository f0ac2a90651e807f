#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Serves linglix.main:app with auto-reload. Configuration (DATABASE_URL,
LOG_LEVEL, ...) is read from the environment or backend/.env.
"""
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

import uvicorn  # noqa: E402

from linglix.core.config import settings  # noqa: E402

if __name__ == "__main__":
    uvicorn.run(
        "linglix.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )
