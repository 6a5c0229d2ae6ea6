"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Rows in the relational store
- Schemas: API contract (what client sends/receives)
"""
