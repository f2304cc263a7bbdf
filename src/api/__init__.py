"""FastAPI routes and endpoints.

Endpoints:
- GET /health: Service health status
- GET /ready: Readiness probe (preset service initialized)
- POST /v1/presets/resolve: Resolve a preset reference
"""
