"""
Data access layer.

Design rules:
- Views call ONLY functions in this package.
- All backend calls are wrapped to allow graceful fallback to local data.
- No env var reads here (config-only).
"""
