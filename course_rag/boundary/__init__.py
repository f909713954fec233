"""
Boundary layer for external system integrations.

Holds the PostgreSQL/pgvector adapter and the index store implementations.
"""
