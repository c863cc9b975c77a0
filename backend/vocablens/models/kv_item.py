from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vocablens.models.base import Base


class KVItem(Base):
    """One key of the local key-value store. Values are opaque strings."""

    __tablename__ = "kv_items"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
