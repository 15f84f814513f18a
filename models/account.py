from typing import List, Optional
from sqlalchemy import String, Boolean, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from .base import Base


class AccountRole(str, enum.Enum):
    ADMIN = "admin"
    MEMBER = "member"


class Account(Base):
    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(String(255), unique=True)
    login_name: Mapped[str] = mapped_column(String(50))
    display_name: Mapped[str] = mapped_column(String(100))
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[AccountRole] = mapped_column(SQLEnum(AccountRole, values_callable=lambda x: [e.value for e in x]), default=AccountRole.MEMBER, nullable=False)

    active: Mapped[bool] = mapped_column(Boolean, default=True)

    memberships: Mapped[List["Membership"]] = relationship(back_populates="account", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN
