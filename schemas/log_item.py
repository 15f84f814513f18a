from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class LogItemOut(BaseModel):
    id: UUID
    log_date_utc: datetime
    ip_address: str | None = None
    culture: str | None = None
    url: str | None = None
    short_url: str | None = None
    thread: str | None = None
    log_level: str
    logger: str
    message: str

    model_config = {"from_attributes": True}


class LogListOut(BaseModel):
    items: list[LogItemOut]
    page_number: int
    page_size: int
    total_items: int


class LogItemsDeleted(BaseModel):
    deleted: int
