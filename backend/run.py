"""Run script with proper environment loading"""
import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE_DIR))

from dotenv import load_dotenv

# Explicit launcher: the project .env wins over the inherited shell environment
load_dotenv(BASE_DIR.parent / ".env", override=True)

os.chdir(BASE_DIR)

if __name__ == "__main__":
    import uvicorn

    from carstatus.core.config import get_settings
    from main import app

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )
