import pytest
from datetime import datetime
from uuid import uuid4
from zoneinfo import available_timezones

from core.exceptions import NotFound, OperationNotAllowed, ValidationError
from core.settings import settings
from models import Account, AccountRole, Membership, SiteHost
from repositories.site_host_repository import SiteHostRepository
from repositories.site_repository import SiteRepository
from schemas.site import (
    CompanyInfo,
    MailSettings,
    NewSite,
    RegisterPageInfoIn,
    SiteBasicSettings,
)
from services.site_service import SiteService
from services.tenant_identity_resolver import TenantIdentityResolver


def new_site_data(**overrides) -> NewSite:
    data = {
        "site_name": "Blog",
        "folder_name": "Blog",
        "email": "owner@example.com",
        "login_name": "owner",
        "display_name": "Blog Owner",
        "password": "secret-password",
    }
    data.update(overrides)
    return NewSite(**data)


@pytest.mark.unit
class TestSiteService:

    @pytest.fixture(autouse=True)
    def _service(self, db_session):
        self.db = db_session
        self.site_repository = SiteRepository(db_session)
        self.host_repository = SiteHostRepository(db_session)
        self.resolver = TenantIdentityResolver(self.site_repository, self.host_repository)
        self.service = SiteService(db_session, self.site_repository, self.host_repository, self.resolver)

    def test_get_site_for_edit_defaults_to_current_site(self, primary_site, child_site):
        assert self.service.get_site_for_edit(primary_site, None) is primary_site
        assert self.service.get_site_for_edit(primary_site, primary_site.id) is primary_site

    def test_server_admin_site_may_edit_other_sites(self, primary_site, child_site):
        assert self.service.get_site_for_edit(primary_site, child_site.id).id == child_site.id

    def test_child_site_only_edits_itself(self, primary_site, child_site):
        assert self.service.get_site_for_edit(child_site, primary_site.id) is child_site

    def test_get_site_for_edit_unknown_site(self, primary_site):
        with pytest.raises(NotFound):
            self.service.get_site_for_edit(primary_site, uuid4())

    def test_list_sites_pages_by_name(self, primary_site, make_site):
        for name in ("Charlie", "Alpha", "Bravo"):
            make_site(site_name=name, folder_name=name.lower())

        sites, total = self.service.list_sites(page_number=1, page_size=2)

        assert total == 4
        assert [site.site_name for site in sites] == ["Alpha", "Bravo"]

    def test_basic_settings_show_delete_only_from_server_admin_site(self, primary_site, child_site):
        assert self.service.get_basic_settings(child_site, primary_site)["show_delete"] is True
        assert self.service.get_basic_settings(primary_site, primary_site)["show_delete"] is False
        assert self.service.get_basic_settings(child_site, child_site)["show_delete"] is False

    def test_basic_settings_hide_delete_when_disabled(self, monkeypatch, primary_site, child_site):
        monkeypatch.setattr(settings, "ALLOW_DELETE_CHILD_SITES", False)

        assert self.service.get_basic_settings(child_site, primary_site)["show_delete"] is False

    def test_basic_settings_include_options(self, child_site):
        data = self.service.get_basic_settings(child_site, child_site)

        assert data["site_id"] == child_site.id
        assert data["folder_name"] == "child"
        assert data["all_time_zones"] == sorted(available_timezones())
        assert data["available_themes"] == settings.split_csv(settings.AVAILABLE_THEMES)

    def test_update_basic_settings_in_folder_mode(self, child_site):
        data = SiteBasicSettings(site_name="Renamed", folder_name="Renamed-Folder", time_zone_id="Europe/Amsterdam")

        site = self.service.update_basic_settings(child_site, data)

        assert site.site_name == "Renamed"
        assert site.folder_name == "renamed-folder"
        assert site.time_zone_id == "Europe/Amsterdam"

    def test_update_basic_settings_rejects_taken_folder(self, child_site, make_site):
        make_site(folder_name="taken")

        with pytest.raises(ValidationError, match="folder taken"):
            self.service.update_basic_settings(child_site, SiteBasicSettings(site_name="x", folder_name="taken"))

    def test_update_basic_settings_in_host_mode_sets_preferred_host(self, host_name_mode, child_site):
        data = SiteBasicSettings(site_name=child_site.site_name, host_name="https://Child.Example.com")

        site = self.service.update_basic_settings(child_site, data)

        assert site.preferred_host_name == "child.example.com"
        assert [h.host_name for h in self.host_repository.list_by_site(site.id)] == ["child.example.com"]

    def test_update_basic_settings_in_host_mode_blank_host_clears_preferred(self, host_name_mode, child_site):
        child_site.preferred_host_name = "child.example.com"
        self.site_repository.save(child_site)

        site = self.service.update_basic_settings(child_site, SiteBasicSettings(site_name="x", host_name=""))

        assert site.preferred_host_name is None

    def test_create_site_in_folder_mode(self, primary_site):
        site = self.service.create_site(new_site_data())

        assert site.alias_id == "s2"
        assert site.folder_name == "blog"
        assert site.is_server_admin_site is False

        admin = self.db.query(Account).filter(Account.email == "owner@example.com").one()
        assert admin.role == AccountRole.ADMIN
        assert admin.password_hash != "secret-password"
        assert self.db.query(Membership).filter(
            Membership.account_id == admin.id, Membership.site_id == site.id
        ).count() == 1

    def test_create_site_requires_folder(self, primary_site):
        with pytest.raises(ValidationError, match="folder required"):
            self.service.create_site(new_site_data(folder_name="  "))

    def test_create_site_rejects_taken_folder_without_side_effects(self, primary_site, child_site):
        with pytest.raises(ValidationError, match="folder taken"):
            self.service.create_site(new_site_data(folder_name="CHILD"))

        assert self.site_repository.count() == 2
        assert self.db.query(Account).count() == 0

    def test_create_site_rejects_taken_email(self, primary_site, server_admin):
        with pytest.raises(ValidationError, match="email taken"):
            self.service.create_site(new_site_data(email=server_admin.email))

        assert self.site_repository.count() == 1

    def test_create_site_skips_used_alias(self, primary_site, make_site):
        make_site(alias_id="s2", folder_name="other")
        self.db.delete(primary_site)
        self.db.commit()

        site = self.service.create_site(new_site_data())

        # One site left, so "s2" would be next, but it is in use
        assert site.alias_id == "s3"

    def test_create_site_in_host_mode_maps_host_after_save(self, host_name_mode, primary_site):
        site = self.service.create_site(new_site_data(folder_name=None, host_name="http://blog.example.com"))

        assert site.folder_name is None
        assert site.preferred_host_name == "blog.example.com"
        hosts = self.host_repository.list_by_site(site.id)
        assert [host.host_name for host in hosts] == ["blog.example.com"]

    def test_create_site_in_host_mode_rejects_used_host(self, host_name_mode, primary_site):
        self.host_repository.insert(primary_site.id, "blog.example.com")

        with pytest.raises(ValidationError, match="host taken"):
            self.service.create_site(new_site_data(folder_name=None, host_name="blog.example.com"))

        assert self.site_repository.count() == 1

    def test_settings_group_update_writes_only_its_fields(self, child_site):
        child_site.smtp_server = "smtp.example.com"
        child_site.site_name = "Keep Me"
        self.site_repository.save(child_site)

        self.service.update_settings_group(
            child_site, CompanyInfo(company_name="Acme", company_public_email="info@acme.example.com")
        )
        self.db.refresh(child_site)

        assert child_site.company_name == "Acme"
        assert child_site.company_public_email == "info@acme.example.com"
        assert child_site.smtp_server == "smtp.example.com"
        assert child_site.site_name == "Keep Me"

    def test_mail_settings_update(self, child_site):
        self.service.update_settings_group(
            child_site,
            MailSettings(smtp_server="smtp.example.com", smtp_port=587, default_email_from_address="no-reply@example.com"),
        )

        assert child_site.smtp_port == 587
        assert child_site.email_is_configured is True

    def test_changed_agreement_bumps_terms_date_when_requested(self, child_site):
        data = RegisterPageInfoIn(
            registration_agreement="New terms",
            require_users_to_accept_changed_agreement=True,
        )

        site = self.service.update_register_page_info(child_site, data)

        assert site.registration_agreement == "New terms"
        assert isinstance(site.terms_updated_utc, datetime)

    def test_changed_agreement_without_request_keeps_terms_date(self, child_site):
        site = self.service.update_register_page_info(
            child_site, RegisterPageInfoIn(registration_agreement="New terms")
        )

        assert site.terms_updated_utc is None

    def test_unchanged_agreement_keeps_terms_date(self, child_site):
        child_site.registration_agreement = "Same terms"
        self.site_repository.save(child_site)

        site = self.service.update_register_page_info(
            child_site,
            RegisterPageInfoIn(registration_agreement="Same terms", require_users_to_accept_changed_agreement=True),
        )

        assert site.terms_updated_utc is None

    def test_delete_server_admin_site_is_refused(self, primary_site):
        with pytest.raises(OperationNotAllowed, match="server admin site"):
            self.service.delete_site(primary_site.id)

        assert self.site_repository.find_by_id(primary_site.id) is not None

    def test_delete_child_site_removes_hosts(self, child_site):
        self.resolver.assign_host_name(child_site, "child.example.com")
        child_id, child_name = child_site.id, child_site.site_name

        name = self.service.delete_site(child_id)

        assert name == child_name
        assert self.site_repository.find_by_id(child_id) is None
        assert self.db.query(SiteHost).count() == 0

    def test_delete_child_site_refused_when_disabled(self, monkeypatch, child_site):
        monkeypatch.setattr(settings, "ALLOW_DELETE_CHILD_SITES", False)

        with pytest.raises(OperationNotAllowed):
            self.service.delete_site(child_site.id)

    def test_delete_unknown_site(self):
        with pytest.raises(NotFound):
            self.service.delete_site(uuid4())

    def test_add_host_does_not_change_preferred_host(self, child_site):
        self.service.add_host(child_site, "www.child.example.com")

        assert child_site.preferred_host_name is None
        assert len(self.service.list_hosts(child_site)) == 1

    def test_remove_host_saves_cleared_preferred_host(self, child_site):
        host = self.service.add_host(child_site, "child.example.com")
        child_site.preferred_host_name = "child.example.com"
        self.site_repository.save(child_site)

        removed = self.service.remove_host(child_site, host.id)

        self.db.refresh(child_site)
        assert removed == "child.example.com"
        assert child_site.preferred_host_name is None
