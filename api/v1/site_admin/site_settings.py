"""Settings forms of a site.

Every form works on the current site unless a server admin passes the
``site_id`` of another site.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from models import Account, Site
from schemas.site import (
    CaptchaSettings,
    CompanyInfo,
    LoginPageInfo,
    MailSettings,
    RegisterPageInfoIn,
    RegisterPageInfoOut,
    SecuritySettings,
    SecuritySettingsOut,
    SettingsUpdated,
    SiteBasicSettings,
    SiteBasicSettingsOut,
    SmsSettings,
    SocialLoginSettings,
)
from services.site_service import SiteService, get_site_service
from utils.get_current_account import require_site_admin
from utils.get_current_site import get_current_site

router = APIRouter()


def _updated(site: Site, message: str) -> SettingsUpdated:
    return SettingsUpdated(site_id=site.id, message=message.format(site.site_name))


@router.get("/site-info", response_model=SiteBasicSettingsOut)
def get_site_info(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, site_id)
    return SiteBasicSettingsOut(**service.get_basic_settings(site, current_site))


@router.put("/site-info", response_model=SettingsUpdated)
def update_site_info(
    data: SiteBasicSettings,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_basic_settings(site, data)
    return _updated(site, "Basic site settings for {} were successfully updated.")


@router.get("/company-info", response_model=CompanyInfo)
def get_company_info(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    return CompanyInfo.from_site(service.get_site_for_edit(current_site, site_id))


@router.put("/company-info", response_model=SettingsUpdated)
def update_company_info(
    data: CompanyInfo,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_settings_group(site, data)
    return _updated(site, "Company Info for {} was successfully updated.")


@router.get("/mail-settings", response_model=MailSettings)
def get_mail_settings(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    return MailSettings.from_site(service.get_site_for_edit(current_site, site_id))


@router.put("/mail-settings", response_model=SettingsUpdated)
def update_mail_settings(
    data: MailSettings,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_settings_group(site, data)
    return _updated(site, "Email Settings for {} were successfully updated.")


@router.get("/sms-settings", response_model=SmsSettings)
def get_sms_settings(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    return SmsSettings.from_site(service.get_site_for_edit(current_site, site_id))


@router.put("/sms-settings", response_model=SettingsUpdated)
def update_sms_settings(
    data: SmsSettings,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_settings_group(site, data)
    return _updated(site, "SMS Settings for {} were successfully updated.")


@router.get("/security-settings", response_model=SecuritySettingsOut)
def get_security_settings(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    # Includes whether email, sms and social logins are usable, so the form can warn
    return SecuritySettingsOut.from_site(service.get_site_for_edit(current_site, site_id))


@router.put("/security-settings", response_model=SettingsUpdated)
def update_security_settings(
    data: SecuritySettings,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_settings_group(site, data)
    return _updated(site, "Security Settings for {} was successfully updated.")


@router.get("/captcha-settings", response_model=CaptchaSettings)
def get_captcha_settings(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    return CaptchaSettings.from_site(service.get_site_for_edit(current_site, site_id))


@router.put("/captcha-settings", response_model=SettingsUpdated)
def update_captcha_settings(
    data: CaptchaSettings,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_settings_group(site, data)
    return _updated(site, "Captcha Settings for {} was successfully updated.")


@router.get("/social-logins", response_model=SocialLoginSettings)
def get_social_logins(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    return SocialLoginSettings.from_site(service.get_site_for_edit(current_site, site_id))


@router.put("/social-logins", response_model=SettingsUpdated)
def update_social_logins(
    data: SocialLoginSettings,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_settings_group(site, data)
    return _updated(site, "Social Login Settings for {} was successfully updated.")


@router.get("/login-page-info", response_model=LoginPageInfo)
def get_login_page_info(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    return LoginPageInfo.from_site(service.get_site_for_edit(current_site, site_id))


@router.put("/login-page-info", response_model=SettingsUpdated)
def update_login_page_info(
    data: LoginPageInfo,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_settings_group(site, data)
    return _updated(site, "Login Page Info for {} was successfully updated.")


@router.get("/register-page-info", response_model=RegisterPageInfoOut)
def get_register_page_info(
    site_id: UUID | None = Query(None),
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    return RegisterPageInfoOut.from_site(service.get_site_for_edit(current_site, site_id))


@router.put("/register-page-info", response_model=SettingsUpdated)
def update_register_page_info(
    data: RegisterPageInfoIn,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_site_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, data.site_id)
    site = service.update_register_page_info(site, data)
    return _updated(site, "Registration Page Content for {} was successfully updated.")
