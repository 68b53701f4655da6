"""Shared test fixtures and configuration."""
import os

# Environment defaults for modules that read settings at import time
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("LOG_LEVEL", "WARNING")
