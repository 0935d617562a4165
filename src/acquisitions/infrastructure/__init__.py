"""Infrastructure layer - external dependencies and implementations.

This layer contains the database adapters (SQLAlchemy), the HTTP API
(FastAPI) and the authentication primitives (Argon2, JWT, cookies).
"""
