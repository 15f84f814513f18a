import pytest
from uuid import uuid4

from core.exceptions import NotFound
from repositories.site_host_repository import SiteHostRepository


@pytest.mark.unit
class TestSiteHostRepository:

    @pytest.fixture(autouse=True)
    def _repository(self, db_session):
        self.repository = SiteHostRepository(db_session)

    def test_insert_and_find(self, child_site):
        host = self.repository.insert(child_site.id, "child.example.com")

        assert self.repository.find_by_host_name("child.example.com").id == host.id
        assert self.repository.find_by_id(host.id).site_id == child_site.id
        assert self.repository.find_by_host_name("other.example.com") is None

    def test_list_by_site_sorted(self, primary_site, child_site):
        self.repository.insert(child_site.id, "www.child.example.com")
        self.repository.insert(child_site.id, "child.example.com")
        self.repository.insert(primary_site.id, "example.com")

        hosts = self.repository.list_by_site(child_site.id)

        assert [host.host_name for host in hosts] == ["child.example.com", "www.child.example.com"]

    def test_delete(self, child_site):
        host = self.repository.insert(child_site.id, "child.example.com")

        self.repository.delete(child_site.id, host.id)

        assert self.repository.find_by_id(host.id) is None

    def test_delete_requires_owning_site(self, primary_site, child_site):
        host = self.repository.insert(child_site.id, "child.example.com")

        with pytest.raises(NotFound):
            self.repository.delete(primary_site.id, host.id)

        assert self.repository.find_by_id(host.id) is not None

    def test_delete_missing(self, child_site):
        with pytest.raises(NotFound):
            self.repository.delete(child_site.id, uuid4())
