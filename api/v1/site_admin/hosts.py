from uuid import UUID

from fastapi import APIRouter, Depends, status

from models import Account, Site
from schemas.site import HostMappingAdded, SettingsUpdated, SiteHostIn, SiteHostMappingsOut, SiteHostOut
from services.site_service import SiteService, get_site_service
from utils.get_current_account import require_server_admin
from utils.get_current_site import get_current_site

router = APIRouter()


@router.get("/sites/{site_id}/hosts", response_model=SiteHostMappingsOut)
def list_host_mappings(
    site_id: UUID,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_server_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, site_id)
    return SiteHostMappingsOut(
        site_id=site.id,
        preferred_host_name=site.preferred_host_name,
        host_mappings=[SiteHostOut.model_validate(host) for host in service.list_hosts(site)],
    )


@router.post("/sites/{site_id}/hosts", response_model=HostMappingAdded, status_code=status.HTTP_201_CREATED)
def add_host_mapping(
    site_id: UUID,
    data: SiteHostIn,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_server_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, site_id)
    host = service.add_host(site, data.host_name)
    return HostMappingAdded(
        id=host.id,
        site_id=host.site_id,
        host_name=host.host_name,
        message=f"Host/domain mapping for {site.site_name} was successfully created.",
    )


@router.delete("/sites/{site_id}/hosts/{host_id}", response_model=SettingsUpdated)
def delete_host_mapping(
    site_id: UUID,
    host_id: UUID,
    current_site: Site = Depends(get_current_site),
    _: Account = Depends(require_server_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.get_site_for_edit(current_site, site_id)
    service.remove_host(site, host_id)
    return SettingsUpdated(
        site_id=site.id,
        message=f"Host/domain mapping for {site.site_name} was successfully removed.",
    )
