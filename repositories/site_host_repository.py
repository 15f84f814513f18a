from uuid import UUID

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import NotFound, translate_integrity_error
from db.session import get_db
from models import SiteHost


class SiteHostRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_host_name(self, host_name: str) -> SiteHost | None:
        return self.db.execute(
            select(SiteHost).where(SiteHost.host_name == host_name)
        ).scalar_one_or_none()

    def find_by_id(self, host_id: UUID) -> SiteHost | None:
        return self.db.get(SiteHost, host_id)

    def list_by_site(self, site_id: UUID) -> list[SiteHost]:
        return list(
            self.db.execute(
                select(SiteHost).where(SiteHost.site_id == site_id).order_by(SiteHost.host_name)
            ).scalars().all()
        )

    def insert(self, site_id: UUID, host_name: str) -> SiteHost:
        host = SiteHost(site_id=site_id, host_name=host_name)
        self.db.add(host)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise translate_integrity_error(e) from e
        self.db.refresh(host)
        return host

    def delete(self, site_id: UUID, host_id: UUID) -> None:
        host = self.db.execute(
            select(SiteHost).where(SiteHost.id == host_id, SiteHost.site_id == site_id)
        ).scalar_one_or_none()
        if not host:
            raise NotFound("Host mapping not found")

        self.db.delete(host)
        self.db.commit()


def get_site_host_repository(db: Session = Depends(get_db)) -> SiteHostRepository:
    return SiteHostRepository(db)
