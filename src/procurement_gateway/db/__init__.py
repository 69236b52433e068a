"""
procurement_gateway.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide the users table, engine/session setup and the user repository.
"""

# Package marker.
