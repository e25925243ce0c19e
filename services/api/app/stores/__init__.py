"""Data stores for persistence.

Stores handle:
- PostgreSQL: DB session, engine lifecycle, table management

No shaping or validation logic in stores - that belongs in services.
"""
