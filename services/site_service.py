"""Site administration: the settings forms, site creation and deletion,
host name mappings.

Each settings form reads the selected site, copies the submitted field group
onto it and saves. Folder and host name ownership goes through the
``TenantIdentityResolver``.
"""
from datetime import datetime, timezone
from uuid import UUID
from zoneinfo import available_timezones

from fastapi import Depends
from sqlalchemy.orm import Session

from core.exceptions import OperationNotAllowed, ValidationError
from core.logging_config import get_logger
from core.settings import settings
from db.session import get_db
from models import Site, SiteHost
from repositories.site_host_repository import SiteHostRepository, get_site_host_repository
from repositories.site_repository import SiteRepository, get_site_repository
from schemas.site import NewSite, RegisterPageInfoIn, SiteBasicSettings, SiteSettingsGroup
from services.account_service import AccountService
from services.tenant_identity_resolver import (
    TenantIdentityResolver,
    get_tenant_identity_resolver,
    normalize_folder_name,
    normalize_host_name,
)

logger = get_logger(__name__)

BASIC_SETTINGS_FIELDS = (
    "site_name",
    "time_zone_id",
    "theme",
    "forced_culture",
    "forced_ui_culture",
    "site_is_closed",
    "site_is_closed_message",
    "google_analytics_profile_id",
    "add_this_profile_id",
)


class SiteService:

    def __init__(
        self,
        db: Session,
        site_repository: SiteRepository,
        host_repository: SiteHostRepository,
        resolver: TenantIdentityResolver,
    ):
        self.db = db
        self.site_repository = site_repository
        self.host_repository = host_repository
        self.resolver = resolver

    def get_site_for_edit(self, current_site: Site, site_id: UUID | None) -> Site:
        """The site a settings form works on.

        Only the server admin site may edit other sites; everyone else always
        gets their own site, whatever ``site_id`` says.
        """
        if site_id is None or site_id == current_site.id or not current_site.is_server_admin_site:
            return current_site
        return self.site_repository.get_by_id(site_id)

    def list_sites(self, page_number: int, page_size: int) -> tuple[list[Site], int]:
        sites = self.site_repository.get_page_other_sites(None, page_number, page_size)
        return sites, self.site_repository.count()

    def get_basic_settings(self, site: Site, current_site: Site) -> dict:
        """Basic settings form of ``site`` as seen from ``current_site``.

        Deleting is offered only to the server admin site, for other sites.
        """
        data = {field: getattr(site, field) for field in BASIC_SETTINGS_FIELDS}
        data.update(
            site_id=site.id,
            alias_id=site.alias_id,
            folder_name=site.folder_name,
            host_name=site.preferred_host_name,
            show_delete=(
                settings.ALLOW_DELETE_CHILD_SITES
                and current_site.is_server_admin_site
                and site.id != current_site.id
            ),
            available_themes=settings.split_csv(settings.AVAILABLE_THEMES),
            all_time_zones=sorted(available_timezones()),
            available_cultures=settings.split_csv(settings.SUPPORTED_CULTURES),
            available_ui_cultures=settings.split_csv(settings.SUPPORTED_UI_CULTURES),
        )
        return data

    def update_basic_settings(self, site: Site, data: SiteBasicSettings) -> Site:
        for field in BASIC_SETTINGS_FIELDS:
            setattr(site, field, getattr(data, field))

        if settings.uses_folder_names:
            self.resolver.assign_folder_name(site, data.folder_name)
        else:
            host_name = normalize_host_name(data.host_name)
            if host_name:
                self.resolver.assign_host_name(site, host_name)
            site.preferred_host_name = host_name or None

        site = self.site_repository.save(site)
        logger.info_ctx("Basic site settings updated", site_id=str(site.id))
        return site

    def create_site(self, data: NewSite) -> Site:
        """Create a child site together with its administrator account.

        Folder and host names are checked up front so a rejected request
        leaves nothing behind. The host mapping is added once the site has
        been saved.
        """
        site = Site(
            site_name=data.site_name,
            time_zone_id=data.time_zone_id,
            site_is_closed=data.site_is_closed,
            site_is_closed_message=data.site_is_closed_message,
            is_server_admin_site=False,
        )

        host_name = ""
        if settings.uses_folder_names:
            folder_name = normalize_folder_name(data.folder_name)
            if not folder_name:
                raise ValidationError("folder_name", "folder required")
            if not self.resolver.is_folder_name_available(None, folder_name):
                raise ValidationError("folder_name", "folder taken")
            site.folder_name = folder_name
        else:
            host_name = normalize_host_name(data.host_name)
            if host_name and not self.resolver.is_host_name_available(None, host_name):
                raise ValidationError("host_name", "host taken")

        AccountService.ensure_email_available(self.db, data.email)

        site.alias_id = self._next_free_alias_id()
        site = self.site_repository.save(site)

        AccountService.create_site_administrator(
            self.db,
            site,
            email=data.email,
            login_name=data.login_name,
            display_name=data.display_name,
            password=data.password,
        )

        if host_name:
            self.resolver.assign_host_name(site, host_name)
            site.preferred_host_name = host_name
            site = self.site_repository.save(site)

        logger.info_ctx("Site created", site_id=str(site.id), alias_id=site.alias_id)
        return site

    def update_settings_group(self, site: Site, group: SiteSettingsGroup) -> Site:
        """Copy one settings form onto the site. Fields outside the form are left alone."""
        for field, value in group.site_fields().items():
            setattr(site, field, value)
        return self.site_repository.save(site)

    def update_register_page_info(self, site: Site, data: RegisterPageInfoIn) -> Site:
        agreement_changed = (site.registration_agreement or "") != (data.registration_agreement or "")

        for field, value in data.site_fields().items():
            setattr(site, field, value)

        if agreement_changed and data.require_users_to_accept_changed_agreement:
            site.terms_updated_utc = datetime.now(timezone.utc)

        return self.site_repository.save(site)

    def delete_site(self, site_id: UUID) -> str:
        """Delete a child site with its host mappings and memberships. Returns the site name."""
        site = self.site_repository.get_by_id(site_id)
        site_name, alias_id = site.site_name, site.alias_id

        if site.is_server_admin_site:
            raise OperationNotAllowed(f"The site {site_name} was not deleted because it is a server admin site.")
        if not settings.ALLOW_DELETE_CHILD_SITES:
            raise OperationNotAllowed(f"The site {site_name} was not deleted because deleting sites is disabled.")

        self.site_repository.delete(site)
        logger.warning_ctx("Site deleted", site_id=str(site_id), alias_id=alias_id)
        return site_name

    def list_hosts(self, site: Site) -> list[SiteHost]:
        return self.host_repository.list_by_site(site.id)

    def add_host(self, site: Site, host_name: str) -> SiteHost:
        return self.resolver.assign_host_name(site, host_name)

    def remove_host(self, site: Site, host_id: UUID) -> str:
        host_name = self.resolver.remove_host_mapping(site, host_id)
        self.site_repository.save(site)
        return host_name

    def _next_free_alias_id(self) -> str:
        # The count based alias can collide once sites have been deleted
        count = self.site_repository.count()
        alias_id = self.resolver.next_alias_id(count)
        while not self.resolver.is_alias_available(None, alias_id):
            count += 1
            alias_id = self.resolver.next_alias_id(count)
        return alias_id


def get_site_service(
    db: Session = Depends(get_db),
    site_repository: SiteRepository = Depends(get_site_repository),
    host_repository: SiteHostRepository = Depends(get_site_host_repository),
    resolver: TenantIdentityResolver = Depends(get_tenant_identity_resolver),
) -> SiteService:
    return SiteService(db, site_repository, host_repository, resolver)
