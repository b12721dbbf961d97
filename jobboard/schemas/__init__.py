"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models (jobboard.db.models): tables and relationships
- Schemas: API contract, camelCase on the wire
"""
