"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: domain aggregates that own the rules
- Schemas: API contract (what client sends/receives)
"""
