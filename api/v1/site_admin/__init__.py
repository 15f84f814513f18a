from fastapi import APIRouter
from . import sites, site_settings, hosts

router = APIRouter()

router.include_router(sites.router, tags=["Site Admin - Sites"])
router.include_router(site_settings.router, tags=["Site Admin - Settings"])
router.include_router(hosts.router, tags=["Site Admin - Host Mappings"])
