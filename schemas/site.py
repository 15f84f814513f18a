from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class SiteSettingsGroup(BaseModel):
    """Common shape of every settings form: the site it belongs to.

    ``site_id`` may be omitted on update to mean the current site.
    """
    site_id: UUID | None = None

    model_config = {"from_attributes": True}

    def site_fields(self) -> dict:
        return self.model_dump(exclude={"site_id"})

    @classmethod
    def from_site(cls, site):
        group = cls.model_validate(site)
        group.site_id = site.id
        return group


class SiteListItem(BaseModel):
    id: UUID
    alias_id: str
    site_name: str
    folder_name: str | None = None
    preferred_host_name: str | None = None
    is_server_admin_site: bool
    site_is_closed: bool

    model_config = {"from_attributes": True}


class SiteListOut(BaseModel):
    sites: list[SiteListItem]
    page_number: int
    page_size: int
    total_items: int


class SiteBasicSettings(SiteSettingsGroup):
    site_name: str = Field(..., min_length=1, max_length=255)
    time_zone_id: str = "UTC"
    theme: str | None = None
    forced_culture: str | None = None
    forced_ui_culture: str | None = None
    site_is_closed: bool = False
    site_is_closed_message: str | None = None
    google_analytics_profile_id: str | None = None
    add_this_profile_id: str | None = None
    folder_name: str | None = None
    host_name: str | None = None


class SiteBasicSettingsOut(SiteBasicSettings):
    alias_id: str
    show_delete: bool = False
    available_themes: list[str] = []
    all_time_zones: list[str] = []
    available_cultures: list[str] = []
    available_ui_cultures: list[str] = []


class NewSite(BaseModel):
    site_name: str = Field(..., min_length=1, max_length=255)
    time_zone_id: str = "UTC"
    folder_name: str | None = None
    host_name: str | None = None
    site_is_closed: bool = False
    site_is_closed_message: str | None = None

    # Administrator account for the new site
    email: EmailStr
    login_name: str = Field(..., min_length=1, max_length=50)
    display_name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=7)


class NewSiteOut(BaseModel):
    id: UUID
    alias_id: str
    site_name: str
    folder_name: str | None = None
    preferred_host_name: str | None = None
    message: str


class CompanyInfo(SiteSettingsGroup):
    company_name: str | None = None
    company_street_address: str | None = None
    company_street_address2: str | None = None
    company_locality: str | None = None
    company_region: str | None = None
    company_postal_code: str | None = None
    company_country: str | None = None
    company_phone: str | None = None
    company_fax: str | None = None
    company_public_email: EmailStr | None = None
    company_website: str | None = None


class MailSettings(SiteSettingsGroup):
    default_email_from_address: EmailStr | None = None
    default_email_from_alias: str | None = None
    smtp_server: str | None = None
    smtp_port: int = Field(25, ge=1, le=65535)
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_preferred_encoding: str | None = None
    smtp_requires_auth: bool = False
    smtp_use_ssl: bool = False


class SmsSettings(SiteSettingsGroup):
    sms_from: str | None = None
    sms_client_id: str | None = None
    sms_secure_token: str | None = None


class SecuritySettings(SiteSettingsGroup):
    allow_new_registration: bool = True
    allow_persistent_login: bool = True
    disable_db_auth: bool = False
    really_delete_users: bool = True
    require_approval_before_login: bool = False
    require_confirmed_email: bool = False
    require_confirmed_phone: bool = False
    use_email_for_login: bool = True
    account_approval_email_csv: str | None = None


class SecuritySettingsOut(SecuritySettings):
    email_is_configured: bool = False
    sms_is_configured: bool = False
    has_any_social_auth_enabled: bool = False


class CaptchaSettings(SiteSettingsGroup):
    recaptcha_public_key: str | None = None
    recaptcha_private_key: str | None = None
    use_invisible_recaptcha: bool = False
    captcha_on_login: bool = False
    captcha_on_registration: bool = False


class SocialLoginSettings(SiteSettingsGroup):
    facebook_app_id: str | None = None
    facebook_app_secret: str | None = None
    google_client_id: str | None = None
    google_client_secret: str | None = None
    microsoft_client_id: str | None = None
    microsoft_client_secret: str | None = None
    twitter_consumer_key: str | None = None
    twitter_consumer_secret: str | None = None
    oid_connect_display_name: str | None = None
    oid_connect_app_id: str | None = None
    oid_connect_app_secret: str | None = None
    oid_connect_authority: str | None = None


class LoginPageInfo(SiteSettingsGroup):
    login_info_top: str | None = None
    login_info_bottom: str | None = None


class RegisterPageInfo(SiteSettingsGroup):
    registration_preamble: str | None = None
    registration_agreement: str | None = None


class RegisterPageInfoIn(RegisterPageInfo):
    # Bumps terms_updated_utc so non-admin users must accept the new agreement
    require_users_to_accept_changed_agreement: bool = False

    def site_fields(self) -> dict:
        return self.model_dump(exclude={"site_id", "require_users_to_accept_changed_agreement"})


class RegisterPageInfoOut(RegisterPageInfo):
    terms_updated_utc: datetime | None = None


class SettingsUpdated(BaseModel):
    site_id: UUID
    message: str


class AvailabilityCheck(BaseModel):
    site_id: UUID | None = None
    value: str | None = None


class SiteHostOut(BaseModel):
    id: UUID
    site_id: UUID
    host_name: str

    model_config = {"from_attributes": True}


class SiteHostMappingsOut(BaseModel):
    site_id: UUID
    preferred_host_name: str | None = None
    host_mappings: list[SiteHostOut]


class SiteHostIn(BaseModel):
    host_name: str = Field(..., min_length=1, max_length=255)


class HostMappingAdded(SiteHostOut):
    message: str
