"""SQLAlchemy adapter – async connection store."""
from clubgate.adapters.sqlalchemy.store import SqlAlchemyStore, SqlAlchemyStoreConnection

__all__ = ["SqlAlchemyStore", "SqlAlchemyStoreConnection"]
