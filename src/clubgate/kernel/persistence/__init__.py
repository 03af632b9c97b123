"""Kernel persistence ports."""
from clubgate.kernel.persistence.ports import Connection, ConnectionStore

__all__ = ["Connection", "ConnectionStore"]
