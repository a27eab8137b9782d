from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mentorhub.core.db import Base


class Setting(Base):
    """Generic key/value row; typed views live in services.settings_store."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
