from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import NotFound, translate_integrity_error
from db.session import get_db
from models import Site


class SiteRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, site_id: UUID) -> Site | None:
        return self.db.get(Site, site_id)

    def get_by_id(self, site_id: UUID) -> Site:
        site = self.find_by_id(site_id)
        if not site:
            raise NotFound("Site not found")
        return site

    def find_by_folder_name(self, folder_name: str) -> Site | None:
        return self.db.execute(
            select(Site).where(func.lower(Site.folder_name) == folder_name.lower())
        ).scalar_one_or_none()

    def find_by_alias_id(self, alias_id: str) -> Site | None:
        return self.db.execute(
            select(Site).where(Site.alias_id == alias_id)
        ).scalar_one_or_none()

    def get_primary(self) -> Site | None:
        return self.db.execute(
            select(Site).where(Site.is_server_admin_site.is_(True)).order_by(Site.created_at).limit(1)
        ).scalar_one_or_none()

    def count(self, exclude_id: UUID | None = None) -> int:
        stmt = select(func.count()).select_from(Site)
        if exclude_id is not None:
            stmt = stmt.where(Site.id != exclude_id)
        return self.db.scalar(stmt) or 0

    def get_page_other_sites(self, exclude_id: UUID | None, page_number: int, page_size: int) -> list[Site]:
        stmt = select(Site).order_by(Site.site_name)
        if exclude_id is not None:
            stmt = stmt.where(Site.id != exclude_id)
        offset = max(page_number - 1, 0) * page_size
        return list(self.db.execute(stmt.offset(offset).limit(page_size)).scalars().all())

    def save(self, site: Site) -> Site:
        self.db.add(site)
        self._commit()
        self.db.refresh(site)
        return site

    def delete(self, site: Site) -> None:
        self.db.delete(site)
        self._commit()

    def _commit(self) -> None:
        # The unique constraints are the authority on folder/alias ownership
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise translate_integrity_error(e) from e


def get_site_repository(db: Session = Depends(get_db)) -> SiteRepository:
    return SiteRepository(db)
