# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Settings are read at import time, so these must be set before app is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("PASSWORD_SECURITY_LEVEL", "low")
os.environ.setdefault("STORAGE_PROVIDER", "cloudinary")
os.environ.setdefault("ENABLE_METRICS", "false")
