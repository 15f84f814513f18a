import uuid

from sqlalchemy import String, UniqueConstraint, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from .base import Base


class SiteHost(Base):
    """Maps a host name to the one site that owns it."""
    __tablename__ = "site_hosts"
    __table_args__ = (
        UniqueConstraint("host_name"),
    )

    host_name: Mapped[str] = mapped_column(String(255), nullable=False)
    site_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), index=True)

    site: Mapped["Site"] = relationship(back_populates="hosts")

    def __repr__(self):
        return f"<SiteHost host_name={self.host_name}>"
