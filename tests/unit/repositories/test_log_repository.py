import pytest
from datetime import datetime, timedelta
from uuid import uuid4

from core.exceptions import NotFound
from repositories.log_repository import LogRepository


@pytest.mark.unit
class TestLogRepository:

    @pytest.fixture(autouse=True)
    def _repository(self, db_session):
        self.repository = LogRepository(db_session)
        self.now = datetime(2026, 1, 15, 12, 0, 0)

    def _add(self, message: str, minutes_ago: int = 0):
        return self.repository.add_log_item(
            log_date_utc=self.now - timedelta(minutes=minutes_ago),
            ip_address="127.0.0.1",
            culture="en-US",
            url="http://testserver/",
            short_url="http://testserver/",
            thread="MainThread",
            log_level="WARNING",
            logger="siteadmin.test",
            message=message,
        )

    def test_add_and_count(self):
        self._add("first")
        self._add("second")

        assert self.repository.count() == 2

    def test_page_newest_first(self):
        self._add("old", minutes_ago=10)
        self._add("new", minutes_ago=1)
        self._add("middle", minutes_ago=5)

        page = self.repository.get_page(page_number=1, page_size=2)

        assert [item.message for item in page] == ["new", "middle"]

    def test_page_oldest_first(self):
        self._add("old", minutes_ago=10)
        self._add("new", minutes_ago=1)

        page = self.repository.get_page(page_number=1, page_size=10, sort_ascending=True)

        assert [item.message for item in page] == ["old", "new"]

    def test_second_page(self):
        for minutes in range(5):
            self._add(f"item {minutes}", minutes_ago=minutes)

        page = self.repository.get_page(page_number=2, page_size=2)

        assert [item.message for item in page] == ["item 2", "item 3"]

    def test_delete(self):
        item = self._add("to delete")

        self.repository.delete(item.id)

        assert self.repository.count() == 0

    def test_delete_missing(self):
        with pytest.raises(NotFound):
            self.repository.delete(uuid4())

    def test_delete_all(self):
        self._add("a")
        self._add("b")

        assert self.repository.delete_all() == 2
        assert self.repository.count() == 0

    def test_delete_older_than(self):
        self._add("old", minutes_ago=120)
        self._add("recent", minutes_ago=5)

        deleted = self.repository.delete_older_than(self.now - timedelta(hours=1))

        assert deleted == 1
        assert [item.message for item in self.repository.get_page(1, 10)] == ["recent"]
