from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class LogItem(Base):
    """An application log entry persisted by the database log handler."""
    __tablename__ = "system_log"

    log_date_utc: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    ip_address: Mapped[str | None] = mapped_column(String(50), nullable=True)
    culture: Mapped[str | None] = mapped_column(String(10), nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    thread: Mapped[str | None] = mapped_column(String(255), nullable=True)
    log_level: Mapped[str] = mapped_column(String(20), nullable=False)
    logger: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self):
        return f"<LogItem level={self.log_level} logger={self.logger}>"
