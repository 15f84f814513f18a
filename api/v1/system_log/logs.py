"""Browse and purge the log records stored by the database log handler."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from models import Account
from repositories.log_repository import LogRepository, get_log_repository
from schemas.log_item import LogItemOut, LogItemsDeleted, LogListOut
from utils.get_current_account import require_server_admin

router = APIRouter()


@router.get("/", response_model=LogListOut)
def list_log_items(
    page_number: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500),
    sort_ascending: bool = Query(False),
    _: Account = Depends(require_server_admin),
    repository: LogRepository = Depends(get_log_repository),
):
    items = repository.get_page(page_number, page_size, sort_ascending=sort_ascending)
    return LogListOut(
        items=[LogItemOut.model_validate(item) for item in items],
        page_number=page_number,
        page_size=page_size,
        total_items=repository.count(),
    )


@router.delete("/", response_model=LogItemsDeleted)
def delete_all_log_items(
    _: Account = Depends(require_server_admin),
    repository: LogRepository = Depends(get_log_repository),
):
    return LogItemsDeleted(deleted=repository.delete_all())


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_log_item(
    log_id: UUID,
    _: Account = Depends(require_server_admin),
    repository: LogRepository = Depends(get_log_repository),
):
    repository.delete(log_id)
