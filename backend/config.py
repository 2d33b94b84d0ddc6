"""Backend configuration settings"""

import os

# CORS origins allowed to access the API during local frontend development
CORS_ORIGINS = os.environ.get(
    "CORS_ORIGINS",
    "http://localhost:5173,http://localhost:4173,http://127.0.0.1:5173,http://127.0.0.1:4173",
).split(",")

# Session configuration
SESSION_HEADER = "X-Session-ID"
SESSION_COOKIE_NAME = os.environ.get("PLATE_LAYOUT_SESSION_COOKIE", "plate_layout_session")
SESSION_MAX_AGE = int(os.environ.get("PLATE_LAYOUT_SESSION_MAX_AGE", "3600"))
SESSION_CLEANUP_INTERVAL = 300  # seconds between expiry sweeps

API_VERSION = "0.1.0"
