"""
Schemas module - Request/Response schemas for API endpoints.

All schemas live in placement_api.schemas.schemas:
- Request schemas (what API accepts, camelCase on the wire)
- Response schemas (what API returns)
"""
