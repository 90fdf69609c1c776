"""Runtime configuration read from the environment (and an optional .env file)."""

import os

from dotenv import load_dotenv

load_dotenv()

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:5174").split(",")
    if o.strip()
]

HOST = os.getenv("POWER4_HOST", "0.0.0.0")
PORT = int(os.getenv("POWER4_PORT", "8080"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SESSION_COOKIE = os.getenv("SESSION_COOKIE", "power4_session")
SESSION_TTL = float(os.getenv("SESSION_TTL", "3600"))  # seconds
