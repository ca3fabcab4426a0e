"""
FastAPI feedback intake service.

Provides REST API for feedback submission with:
- POST /api/feedback - Rate-limited, validated feedback intake
- GET /health - Database health check
"""

from src.api.app import create_app

__all__ = ["create_app"]
