"""
Top‑level package for the Amachou API.

The REST application lives in ``amachou_api.app``; ``amachou_api.client``
is a small HTTP client for the same API.
"""

__all__ = []
