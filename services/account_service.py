from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.auth import get_auth_provider
from core.exceptions import ValidationError, translate_integrity_error
from core.logging_config import get_logger
from models import Account, AccountRole, Membership, Site

logger = get_logger(__name__)


class AccountService:

    @staticmethod
    def get_by_id(session: Session, account_id: UUID | str) -> Account | None:
        """Get account by primary key UUID.

        Args:
            session: Database session
            account_id: Account UUID (primary key), as UUID or string

        Returns:
            Account if found, None otherwise
        """
        if isinstance(account_id, str):
            try:
                account_id = UUID(account_id)
            except ValueError:
                return None
        return session.get(Account, account_id)

    @staticmethod
    def get_by_email(session: Session, email: str) -> Account | None:
        return session.execute(
            select(Account).where(func.lower(Account.email) == email.strip().lower())
        ).scalar_one_or_none()

    @staticmethod
    def is_member(session: Session, account: Account, site: Site) -> bool:
        return session.scalar(
            select(Membership.id).where(
                Membership.account_id == account.id,
                Membership.site_id == site.id,
            )
        ) is not None

    @staticmethod
    def ensure_email_available(session: Session, email: str) -> None:
        if AccountService.get_by_email(session, email) is not None:
            raise ValidationError("email", "email taken")

    @staticmethod
    def create_site_administrator(
        session: Session,
        site: Site,
        email: str,
        login_name: str,
        display_name: str,
        password: str,
    ) -> Account:
        """Create the administrator account of a freshly created site.

        The account gets the admin role and a membership of ``site``; both
        rows are committed together.
        """
        AccountService.ensure_email_available(session, email)

        account = Account(
            email=email.strip().lower(),
            login_name=login_name,
            display_name=display_name,
            password_hash=get_auth_provider().hash_password(password),
            role=AccountRole.ADMIN,
            active=True,
        )
        session.add(account)
        session.add(Membership(account=account, site_id=site.id))
        try:
            session.commit()
        except IntegrityError as e:
            # A concurrent request can take the email after the pre-check
            session.rollback()
            raise translate_integrity_error(e) from e
        session.refresh(account)

        logger.info_ctx("Site administrator created", site_id=str(site.id), account_id=str(account.id))
        return account
