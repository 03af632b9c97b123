"""Application UoW – transactional executor."""
from clubgate.application.uow.executor import UnitOfWorkExecutor

__all__ = ["UnitOfWorkExecutor"]
