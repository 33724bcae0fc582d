"""
main.py
========
Central entry point for the TripTone application.

Run with:
    uvicorn main:app --reload
"""

import logging

from dotenv import load_dotenv

load_dotenv()  # Load .env before the app reads settings at startup

# Configure logging for the entire application
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Keep SDK transport chatter out of the request logs
for _sdk_logger_name in (
    "google_genai",
    "google_genai.models",
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
):
    logging.getLogger(_sdk_logger_name).setLevel(logging.CRITICAL)

logging.getLogger("pymongo").setLevel(logging.WARNING)

from src.api.routes import app  # noqa: F401, E402

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
