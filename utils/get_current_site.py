from fastapi import Depends, HTTPException, Request

from core.settings import settings
from models import Site
from repositories.site_host_repository import SiteHostRepository, get_site_host_repository
from repositories.site_repository import SiteRepository, get_site_repository
from services.tenant_identity_resolver import normalize_folder_name, normalize_host_name


def resolve_request_site(
    request: Request,
    site_repository: SiteRepository,
    host_repository: SiteHostRepository,
) -> Site | None:
    """Find the site a request is addressed to.

    Host name mode looks the request host up in the host mappings, folder
    name mode reads the folder from the ``SITE_FOLDER_HEADER`` header. Both
    fall back to the server admin site.
    """
    site = None
    if settings.uses_host_names:
        host_name = normalize_host_name(request.url.hostname)
        mapping = host_repository.find_by_host_name(host_name) if host_name else None
        if mapping is not None:
            site = site_repository.find_by_id(mapping.site_id)
    else:
        folder_name = normalize_folder_name(request.headers.get(settings.SITE_FOLDER_HEADER))
        if folder_name:
            site = site_repository.find_by_folder_name(folder_name)

    return site or site_repository.get_primary()


def get_current_site(
    request: Request,
    site_repository: SiteRepository = Depends(get_site_repository),
    host_repository: SiteHostRepository = Depends(get_site_host_repository),
) -> Site:
    site = resolve_request_site(request, site_repository, host_repository)
    if site is None:
        raise HTTPException(status_code=404, detail="No site is configured for this request")
    return site
