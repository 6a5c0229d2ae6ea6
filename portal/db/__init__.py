"""
Database module - SQLAlchemy engine and session handling.
"""
from portal.db.database import get_db_session, init_schema, check_database_connection

__all__ = [
    "get_db_session",
    "init_schema",
    "check_database_connection",
]
