from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from core.settings import settings
from models import Account
from schemas.site import AvailabilityCheck, NewSite, NewSiteOut, SiteListItem, SiteListOut
from services.site_service import SiteService, get_site_service
from services.tenant_identity_resolver import TenantIdentityResolver, get_tenant_identity_resolver
from utils.get_current_account import require_server_admin, require_site_admin

router = APIRouter()


@router.get("/sites", response_model=SiteListOut)
def list_sites(
    page_number: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
    _: Account = Depends(require_server_admin),
    service: SiteService = Depends(get_site_service),
):
    page_size = page_size or settings.DEFAULT_PAGE_SIZE_SITE_LIST
    sites, total = service.list_sites(page_number, page_size)
    return SiteListOut(
        sites=[SiteListItem.model_validate(site) for site in sites],
        page_number=page_number,
        page_size=page_size,
        total_items=total,
    )


@router.post("/sites", response_model=NewSiteOut, status_code=status.HTTP_201_CREATED)
def create_site(
    data: NewSite,
    _: Account = Depends(require_server_admin),
    service: SiteService = Depends(get_site_service),
):
    site = service.create_site(data)
    return NewSiteOut(
        id=site.id,
        alias_id=site.alias_id,
        site_name=site.site_name,
        folder_name=site.folder_name,
        preferred_host_name=site.preferred_host_name,
        message=f"Basic site settings for {site.site_name} were successfully created.",
    )


@router.delete("/sites/{site_id}")
def delete_site(
    site_id: UUID,
    _: Account = Depends(require_server_admin),
    service: SiteService = Depends(get_site_service),
):
    site_name = service.delete_site(site_id)
    return {"message": f"The site {site_name} was successfully deleted."}


@router.post("/alias-id-available", response_model=bool)
def alias_id_available(
    data: AvailabilityCheck,
    _: Account = Depends(require_site_admin),
    resolver: TenantIdentityResolver = Depends(get_tenant_identity_resolver),
):
    return resolver.is_alias_available(data.site_id, data.value)


@router.post("/folder-name-available", response_model=bool)
def folder_name_available(
    data: AvailabilityCheck,
    _: Account = Depends(require_site_admin),
    resolver: TenantIdentityResolver = Depends(get_tenant_identity_resolver),
):
    return resolver.is_folder_name_available(data.site_id, data.value)


@router.post("/host-name-available", response_model=bool)
def host_name_available(
    data: AvailabilityCheck,
    _: Account = Depends(require_site_admin),
    resolver: TenantIdentityResolver = Depends(get_tenant_identity_resolver),
):
    return resolver.is_host_name_available(data.site_id, data.value)
