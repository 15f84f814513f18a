"""Folder name, host name and alias ownership rules for sites.

Every check here is an optimistic pre-check for a friendly error message.
Two requests can both see a name as available; the unique constraints on
``sites.folder_name``, ``sites.alias_id`` and ``site_hosts.host_name`` decide
the race, and the repositories report the loser with the same
``ValidationError`` the pre-check would have raised.
"""
from uuid import UUID

from fastapi import Depends

from core.exceptions import NotFound, ValidationError
from core.logging_config import get_logger
from models import Site, SiteHost
from repositories.site_host_repository import SiteHostRepository, get_site_host_repository
from repositories.site_repository import SiteRepository, get_site_repository

logger = get_logger(__name__)

SCHEME_PREFIXES = ("https://", "http://")


def normalize_folder_name(folder_name: str | None) -> str:
    return (folder_name or "").strip().lower()


def normalize_host_name(host_name: str | None) -> str:
    """Turn raw input, possibly a pasted url, into a bare host name."""
    host_name = (host_name or "").strip()
    for prefix in SCHEME_PREFIXES:
        if host_name.lower().startswith(prefix):
            host_name = host_name[len(prefix):]
    return host_name.lower()


class TenantIdentityResolver:

    def __init__(self, site_repository: SiteRepository, host_repository: SiteHostRepository):
        self.site_repository = site_repository
        self.host_repository = host_repository

    def is_folder_name_available(self, exclude_site_id: UUID | None, folder_name: str | None) -> bool:
        folder_name = normalize_folder_name(folder_name)
        if not folder_name:
            return False

        owner = self.site_repository.find_by_folder_name(folder_name)
        return owner is None or owner.id == exclude_site_id

    def is_host_name_available(self, exclude_site_id: UUID | None, host_name: str | None) -> bool:
        host_name = normalize_host_name(host_name)
        if not host_name:
            return False

        mapping = self.host_repository.find_by_host_name(host_name)
        return mapping is None or mapping.site_id == exclude_site_id

    def is_alias_available(self, exclude_site_id: UUID | None, alias_id: str | None) -> bool:
        alias_id = (alias_id or "").strip()
        if not alias_id:
            return False

        owner = self.site_repository.find_by_alias_id(alias_id)
        return owner is None or owner.id == exclude_site_id

    def assign_folder_name(self, site: Site, folder_name: str | None) -> None:
        """Validate and set the folder name. Saving the site is up to the caller."""
        folder_name = normalize_folder_name(folder_name)

        if not folder_name:
            if not site.is_server_admin_site:
                raise ValidationError("folder_name", "folder required")
            # Only the server admin site may live at the root
            site.folder_name = None
            return

        if not self.is_folder_name_available(site.id, folder_name):
            raise ValidationError("folder_name", "folder taken")

        site.folder_name = folder_name

    def assign_host_name(self, site: Site, host_name: str | None) -> SiteHost:
        """Map a host name to the site.

        Idempotent for a host the site already owns. Does not set
        ``preferred_host_name``; callers that want the new host preferred
        set it themselves afterwards.
        """
        host_name = normalize_host_name(host_name)
        if not host_name:
            raise ValidationError("host_name", "host required")

        existing = self.host_repository.find_by_host_name(host_name)
        if existing is not None:
            if existing.site_id != site.id:
                raise ValidationError("host_name", "host taken")
            return existing

        host = self.host_repository.insert(site.id, host_name)
        logger.info_ctx("Host mapping added", site_id=str(site.id), host_name=host_name)
        return host

    def remove_host_mapping(self, site: Site, host_id: UUID) -> str:
        """Delete a mapping and drop it as preferred host if it was.

        The preferred host change rides in the same session commit as the
        delete; callers should still save the site right after.
        """
        host = self.host_repository.find_by_id(host_id)
        if host is None or host.site_id != site.id:
            raise NotFound("Host mapping not found")

        host_name = host.host_name
        if site.preferred_host_name and site.preferred_host_name == host_name:
            site.preferred_host_name = None

        self.host_repository.delete(site.id, host_id)
        logger.info_ctx("Host mapping removed", site_id=str(site.id), host_name=host_name)
        return host_name

    @staticmethod
    def next_alias_id(existing_site_count: int) -> str:
        # Not unique under concurrent creation; re-check with is_alias_available
        return f"s{existing_site_count + 1}"


def get_tenant_identity_resolver(
    site_repository: SiteRepository = Depends(get_site_repository),
    host_repository: SiteHostRepository = Depends(get_site_host_repository),
) -> TenantIdentityResolver:
    return TenantIdentityResolver(site_repository, host_repository)
