"""
Application package initializer.

This package contains the entrypoint for the API (``main``) and its
submodules: ``core`` (configuration, database, logging, errors,
pagination), ``schemas`` (pydantic models), ``services`` (persistence
and search) and ``api`` (routers).
"""

from .main import app  # noqa: F401
