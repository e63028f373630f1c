"""
FastAPI API routes and endpoints.

- routes.py: /api/v1 endpoints (analisar-caso, health, info, estatisticas)
- dependencies.py: Dependency injection for clients, scanner, repository, auth
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request tracing
"""

from juristcu.api import dependencies, error_handlers, models
from juristcu.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
