import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

NASA_API_KEY = os.getenv("NASA_API_KEY") or "DEMO_KEY"

NASA_FEED_URL = os.getenv("NASA_FEED_URL", "https://api.nasa.gov/neo/rest/v1/feed")
NASA_BROWSE_URL = os.getenv("NASA_BROWSE_URL", "https://api.nasa.gov/neo/rest/v1/neo/browse")

# Seconds allowed for a single upstream call
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))

# Skip (and log) malformed asteroid records instead of failing the batch
ISOLATE_RECORD_ERRORS = os.getenv("ISOLATE_RECORD_ERRORS", "false").strip().lower() in ("1", "true", "yes", "on")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Server binding is fixed
HOST = "0.0.0.0"
PORT = 3000

# Home page browse window
BROWSE_PAGE = 0
BROWSE_PAGE_SIZE = 20
