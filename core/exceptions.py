import re


class SiteAdminException(Exception):
    """Base exception"""

    pass


class ValidationError(SiteAdminException):
    """A submitted value was rejected (required, already taken, ...).

    Recoverable: shown to the user next to the offending field.
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class NotFound(SiteAdminException):
    """Referenced site or host mapping does not exist"""

    pass


class OperationNotAllowed(SiteAdminException):
    """The request is valid but the target may not be changed (e.g. deleting the server admin site)"""

    pass


class StoreFailure(SiteAdminException):
    """The database rejected a write for a reason other than a guarded uniqueness rule"""

    pass


# Guarded unique constraints and the validation error a violation maps to
UNIQUE_VIOLATIONS = {
    "uq_sites_folder_name": ("folder_name", "folder taken"),
    "uq_site_hosts_host_name": ("host_name", "host taken"),
    "uq_sites_alias_id": ("alias_id", "alias taken"),
    "uq_accounts_email": ("email", "email taken"),
}

POSTGRES_UNIQUE_VIOLATION = re.compile(r'unique constraint "(\w+)"')
SQLITE_UNIQUE_VIOLATION = re.compile(r"UNIQUE constraint failed: (\w+)\.(\w+)\s*$")


def violated_unique_constraint(error: Exception) -> str | None:
    """Name of the unique constraint behind an integrity error, if it was one.

    psycopg2 reports the name in ``diag``; otherwise it is read from the
    message. SQLite only names the column, which maps onto the
    ``uq_<table>_<column>`` naming convention of the models.
    """
    orig = getattr(error, "orig", error)
    name = getattr(getattr(orig, "diag", None), "constraint_name", None)
    if name:
        return name

    text = str(orig)
    match = POSTGRES_UNIQUE_VIOLATION.search(text)
    if match:
        return match.group(1)
    match = SQLITE_UNIQUE_VIOLATION.search(text)
    if match:
        return f"uq_{match.group(1)}_{match.group(2)}"
    return None


def translate_integrity_error(error: Exception) -> SiteAdminException:
    """Map a database integrity error to the matching domain error."""
    constraint = violated_unique_constraint(error)
    if constraint in UNIQUE_VIOLATIONS:
        field, message = UNIQUE_VIOLATIONS[constraint]
        return ValidationError(field, message)
    return StoreFailure(str(getattr(error, "orig", error)))
