from fastapi import Request, HTTPException, Depends
from sqlalchemy.orm import Session

from core.auth import get_auth_provider
from db.session import get_db
from models import Account, Site
from services.account_service import AccountService
from utils.get_current_site import get_current_site


def get_current_account(
    request: Request,
    db: Session = Depends(get_db)
) -> Account:
    """Get the currently authenticated account.

    Args:
        request: FastAPI request object
        db: Database session

    Returns:
        Account object for the authenticated user

    Raises:
        HTTPException: If authentication fails or account not found
    """
    auth_header = request.headers.get("Authorization")

    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=401,
            detail="Missing or invalid Authorization header"
        )

    token = auth_header.replace("Bearer ", "")

    provider = get_auth_provider()
    decoded = provider.validate_token(token)

    # Account primary key travels in the standard 'sub' claim
    sub = decoded.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    account = AccountService.get_by_id(db, sub)
    if not account or not account.active:
        raise HTTPException(status_code=401, detail="Account not found")

    return account


def require_site_admin(
    account: Account = Depends(get_current_account),
    site: Site = Depends(get_current_site),
    db: Session = Depends(get_db),
) -> Account:
    """Admin of the site the request is addressed to.

    Raises:
        HTTPException: 403 if the account is not an admin or not a member of the site
    """
    if not account.is_admin or not AccountService.is_member(db, account, site):
        raise HTTPException(
            status_code=403,
            detail="Admin access required"
        )
    return account


def require_server_admin(
    account: Account = Depends(require_site_admin),
    site: Site = Depends(get_current_site),
) -> Account:
    """Admin of the server admin site; may manage every site."""
    if not site.is_server_admin_site:
        raise HTTPException(
            status_code=403,
            detail="Server admin access required"
        )
    return account
