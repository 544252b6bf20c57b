"""
Development server launcher.

Loads .env file and runs FastAPI with uvicorn, reloading on change when
DEBUG is set.

Usage:
    python scripts/run_dev.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load .env file before settings are read
from dotenv import load_dotenv

load_dotenv()

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    base_url = f"http://localhost:{settings.API_PORT}"
    print("=" * 60)
    print(f"PWM Development Server {settings.VERSION}")
    print("=" * 60)
    print()
    print(f"API:  {base_url}/api/v1")
    print(f"Docs: {base_url}/docs")
    print(f"Reload: {'on' if settings.DEBUG else 'off'}  Log level: {settings.LOG_LEVEL}")
    print()
    print("Press Ctrl+C to stop")
    print("=" * 60)

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG,
                log_level=settings.LOG_LEVEL.lower(), )
