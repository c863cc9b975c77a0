from vocablens.models.base import Base
from vocablens.models.kv_item import KVItem

__all__ = ["Base", "KVItem"]
