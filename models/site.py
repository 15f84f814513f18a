from datetime import datetime

from sqlalchemy import String, Boolean, Integer, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Site(Base):
    """A tenant of the platform.

    Sites are told apart either by ``folder_name`` (first url segment) or by
    host name (see ``SiteHost``), depending on the multi-tenant mode. The
    server admin site is the primary site: it may have no folder name and
    can never be deleted.
    """
    __tablename__ = "sites"
    __table_args__ = (
        UniqueConstraint("alias_id"),
        UniqueConstraint("folder_name"),
    )

    # Identity and routing
    alias_id: Mapped[str] = mapped_column(String(36), nullable=False)
    site_name: Mapped[str] = mapped_column(String(255), nullable=False)
    folder_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    preferred_host_name: Mapped[str | None] = mapped_column(String(250), nullable=True)
    is_server_admin_site: Mapped[bool] = mapped_column(Boolean, default=False)

    # Basic settings
    time_zone_id: Mapped[str] = mapped_column(String(50), default="UTC")
    theme: Mapped[str | None] = mapped_column(String(100), nullable=True)
    forced_culture: Mapped[str | None] = mapped_column(String(10), nullable=True)
    forced_ui_culture: Mapped[str | None] = mapped_column(String(10), nullable=True)
    site_is_closed: Mapped[bool] = mapped_column(Boolean, default=False)
    site_is_closed_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    google_analytics_profile_id: Mapped[str | None] = mapped_column(String(25), nullable=True)
    add_this_profile_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Company info
    company_name: Mapped[str | None] = mapped_column(String(250), nullable=True)
    company_street_address: Mapped[str | None] = mapped_column(String(250), nullable=True)
    company_street_address2: Mapped[str | None] = mapped_column(String(250), nullable=True)
    company_locality: Mapped[str | None] = mapped_column(String(200), nullable=True)
    company_region: Mapped[str | None] = mapped_column(String(200), nullable=True)
    company_postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    company_country: Mapped[str | None] = mapped_column(String(10), nullable=True)
    company_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    company_fax: Mapped[str | None] = mapped_column(String(20), nullable=True)
    company_public_email: Mapped[str | None] = mapped_column(String(100), nullable=True)
    company_website: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Mail
    default_email_from_address: Mapped[str | None] = mapped_column(String(100), nullable=True)
    default_email_from_alias: Mapped[str | None] = mapped_column(String(100), nullable=True)
    smtp_server: Mapped[str | None] = mapped_column(String(200), nullable=True)
    smtp_port: Mapped[int] = mapped_column(Integer, default=25)
    smtp_user: Mapped[str | None] = mapped_column(String(500), nullable=True)
    smtp_password: Mapped[str | None] = mapped_column(String(500), nullable=True)
    smtp_preferred_encoding: Mapped[str | None] = mapped_column(String(20), nullable=True)
    smtp_requires_auth: Mapped[bool] = mapped_column(Boolean, default=False)
    smtp_use_ssl: Mapped[bool] = mapped_column(Boolean, default=False)

    # SMS
    sms_from: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sms_client_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sms_secure_token: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Security
    allow_new_registration: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_persistent_login: Mapped[bool] = mapped_column(Boolean, default=True)
    disable_db_auth: Mapped[bool] = mapped_column(Boolean, default=False)
    really_delete_users: Mapped[bool] = mapped_column(Boolean, default=True)
    require_approval_before_login: Mapped[bool] = mapped_column(Boolean, default=False)
    require_confirmed_email: Mapped[bool] = mapped_column(Boolean, default=False)
    require_confirmed_phone: Mapped[bool] = mapped_column(Boolean, default=False)
    use_email_for_login: Mapped[bool] = mapped_column(Boolean, default=True)
    account_approval_email_csv: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Captcha
    recaptcha_public_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    recaptcha_private_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    use_invisible_recaptcha: Mapped[bool] = mapped_column(Boolean, default=False)
    captcha_on_login: Mapped[bool] = mapped_column(Boolean, default=False)
    captcha_on_registration: Mapped[bool] = mapped_column(Boolean, default=False)

    # Social logins
    facebook_app_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    facebook_app_secret: Mapped[str | None] = mapped_column(String(500), nullable=True)
    google_client_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    google_client_secret: Mapped[str | None] = mapped_column(String(500), nullable=True)
    microsoft_client_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    microsoft_client_secret: Mapped[str | None] = mapped_column(String(500), nullable=True)
    twitter_consumer_key: Mapped[str | None] = mapped_column(String(100), nullable=True)
    twitter_consumer_secret: Mapped[str | None] = mapped_column(String(500), nullable=True)
    oid_connect_display_name: Mapped[str | None] = mapped_column(String(150), nullable=True)
    oid_connect_app_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    oid_connect_app_secret: Mapped[str | None] = mapped_column(String(500), nullable=True)
    oid_connect_authority: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Login and registration page content
    login_info_top: Mapped[str | None] = mapped_column(Text, nullable=True)
    login_info_bottom: Mapped[str | None] = mapped_column(Text, nullable=True)
    registration_preamble: Mapped[str | None] = mapped_column(Text, nullable=True)
    registration_agreement: Mapped[str | None] = mapped_column(Text, nullable=True)
    terms_updated_utc: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    hosts: Mapped[list["SiteHost"]] = relationship(back_populates="site", cascade="all, delete-orphan")
    memberships: Mapped[list["Membership"]] = relationship(back_populates="site", cascade="all, delete-orphan")

    @property
    def sms_is_configured(self) -> bool:
        return bool(self.sms_from and self.sms_client_id and self.sms_secure_token)

    @property
    def email_is_configured(self) -> bool:
        return bool(self.smtp_server and self.default_email_from_address)

    @property
    def has_any_social_auth_enabled(self) -> bool:
        pairs = (
            (self.facebook_app_id, self.facebook_app_secret),
            (self.google_client_id, self.google_client_secret),
            (self.microsoft_client_id, self.microsoft_client_secret),
            (self.twitter_consumer_key, self.twitter_consumer_secret),
            (self.oid_connect_app_id, self.oid_connect_app_secret),
        )
        return any(key and secret for key, secret in pairs)

    def __repr__(self):
        return f"<Site alias_id={self.alias_id} name={self.site_name}>"
