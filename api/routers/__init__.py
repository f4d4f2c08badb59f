"""
Router package for the progression API.

This package contains all API routers organized by domain:
- health: Health check endpoint
- progression: Feedback capture, baseline, increment configuration,
  progression indicator and preview endpoints
"""

from api.routers.health import router as health_router
from api.routers.progression import router as progression_router

__all__ = [
    "health_router",
    "progression_router",
]
