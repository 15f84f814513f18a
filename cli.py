from dotenv import load_dotenv
load_dotenv()

import typer

from typer import Option

from core.logging_config import setup_logging

app = typer.Typer()


@app.command()
def create_primary_site(
    site_name: str = Option(..., "--site-name"),
    email: str = Option(..., "--email"),
    login_name: str = Option("admin", "--login-name"),
    display_name: str = Option("Administrator", "--display-name"),
    password: str = Option(None, "--password", help="Generated when omitted"),
    host_name: str = Option(None, "--host-name"),
):
    """Create the server admin site and its administrator account."""
    from core.exceptions import ValidationError
    from db.session import db_context
    from models import Site
    from repositories.site_host_repository import SiteHostRepository
    from repositories.site_repository import SiteRepository
    from services.account_service import AccountService
    from services.tenant_identity_resolver import TenantIdentityResolver, normalize_host_name
    from utils.generate_temporary_password import generate_temporary_password

    setup_logging()

    with db_context() as db:
        site_repository = SiteRepository(db)
        if site_repository.get_primary() is not None:
            typer.echo("A server admin site already exists.", err=True)
            raise typer.Exit(code=1)

        resolver = TenantIdentityResolver(site_repository, SiteHostRepository(db))
        try:
            AccountService.ensure_email_available(db, email)
        except ValidationError as e:
            typer.echo(f"{e.field}: {e.message}", err=True)
            raise typer.Exit(code=1)

        site = Site(
            site_name=site_name,
            alias_id=resolver.next_alias_id(site_repository.count()),
            is_server_admin_site=True,
        )
        site = site_repository.save(site)

        generated = password is None
        password = password or generate_temporary_password()
        AccountService.create_site_administrator(
            db,
            site,
            email=email,
            login_name=login_name,
            display_name=display_name,
            password=password,
        )

        host_name = normalize_host_name(host_name)
        if host_name:
            resolver.assign_host_name(site, host_name)
            site.preferred_host_name = host_name
            site_repository.save(site)

        typer.echo(f"Created server admin site {site.site_name} ({site.alias_id}, id {site.id})")
        if generated:
            typer.echo(f"Administrator password: {password}")


@app.command()
def list_sites(
    page_number: int = Option(1, "--page"),
    page_size: int = Option(None, "--page-size"),
):
    """Print the sites, server admin site included."""
    from core.settings import settings
    from db.session import db_context
    from repositories.site_repository import SiteRepository

    page_size = page_size or settings.DEFAULT_PAGE_SIZE_SITE_LIST

    with db_context() as db:
        repository = SiteRepository(db)
        total = repository.count()
        for site in repository.get_page_other_sites(None, page_number, page_size):
            marker = "*" if site.is_server_admin_site else " "
            location = site.folder_name or site.preferred_host_name or "-"
            typer.echo(f"{marker} {site.alias_id:<6} {site.site_name:<40} {location}")

    typer.echo(f"Page {page_number}, {page_size} per page, {total} sites in total")


if __name__ == "__main__":
    app()
