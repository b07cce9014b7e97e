"""Infrastructure layer — SQLite persistence, credentials, the ledger store.

This layer depends on stdlib, SQLAlchemy, and the domain snapshot models
it maps rows onto. It must never import from services, commands, or output.
"""
