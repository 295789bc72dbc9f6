"""Global pytest configuration."""

import os

# Force in-memory storage for tests before any imports
os.environ["REDIS_URL"] = ""
