"""Root conftest: set dummy env vars BEFORE any gpjourney module is imported.

pydantic-settings validates required fields at import time, so these must
be set here, at the module level, before any `from gpjourney.*` import.
"""
import os
import tempfile

os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="gpjourney-test-"))
