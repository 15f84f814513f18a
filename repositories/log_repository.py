from datetime import datetime
from uuid import UUID

from fastapi import Depends
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from core.exceptions import NotFound
from db.session import get_db
from models import LogItem


class LogRepository:
    def __init__(self, db: Session):
        self.db = db

    def add_log_item(
        self,
        log_date_utc: datetime,
        ip_address: str,
        culture: str,
        url: str,
        short_url: str,
        thread: str,
        log_level: str,
        logger: str,
        message: str,
    ) -> LogItem:
        item = LogItem(
            log_date_utc=log_date_utc,
            ip_address=ip_address,
            culture=culture,
            url=url,
            short_url=short_url,
            thread=thread,
            log_level=log_level,
            logger=logger,
            message=message,
        )
        self.db.add(item)
        self.db.commit()
        return item

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(LogItem)) or 0

    def get_page(self, page_number: int, page_size: int, sort_ascending: bool = False) -> list[LogItem]:
        order = LogItem.log_date_utc.asc() if sort_ascending else LogItem.log_date_utc.desc()
        offset = max(page_number - 1, 0) * page_size
        return list(
            self.db.execute(select(LogItem).order_by(order).offset(offset).limit(page_size)).scalars().all()
        )

    def delete(self, log_id: UUID) -> None:
        item = self.db.get(LogItem, log_id)
        if not item:
            raise NotFound("Log item not found")
        self.db.delete(item)
        self.db.commit()

    def delete_all(self) -> int:
        result = self.db.execute(delete(LogItem))
        self.db.commit()
        return result.rowcount

    def delete_older_than(self, cutoff_utc: datetime) -> int:
        result = self.db.execute(delete(LogItem).where(LogItem.log_date_utc < cutoff_utc))
        self.db.commit()
        return result.rowcount


def get_log_repository(db: Session = Depends(get_db)) -> LogRepository:
    return LogRepository(db)
