from .base import StorageClient
from .sqlalchemy_storage import SQLAlchemyStorage

__all__ = ["StorageClient", "SQLAlchemyStorage"]
