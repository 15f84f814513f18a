from fastapi import APIRouter
from . import logs

router = APIRouter()

router.include_router(logs.router, tags=["System Log"])
