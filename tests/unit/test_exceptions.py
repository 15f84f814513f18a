import pytest
from unittest.mock import Mock

from core.exceptions import StoreFailure, ValidationError, translate_integrity_error


def integrity_error(text: str):
    error = Mock()
    error.orig = Exception(text)
    return error


@pytest.mark.unit
class TestTranslateIntegrityError:

    @pytest.mark.parametrize("text, field, message", [
        ("UNIQUE constraint failed: sites.folder_name", "folder_name", "folder taken"),
        ('duplicate key value violates unique constraint "uq_sites_folder_name"', "folder_name", "folder taken"),
        ("UNIQUE constraint failed: site_hosts.host_name", "host_name", "host taken"),
        ('duplicate key value violates unique constraint "uq_sites_alias_id"', "alias_id", "alias taken"),
        ("UNIQUE constraint failed: accounts.email", "email", "email taken"),
    ])
    def test_guarded_columns_become_validation_errors(self, text, field, message):
        result = translate_integrity_error(integrity_error(text))

        assert isinstance(result, ValidationError)
        assert result.field == field
        assert result.message == message

    def test_other_violations_become_store_failures(self):
        result = translate_integrity_error(integrity_error("NOT NULL constraint failed: sites.site_name"))

        assert isinstance(result, StoreFailure)

    @pytest.mark.parametrize("text", [
        "NOT NULL constraint failed: sites.alias_id",
        'null value in column "host_name" of relation "site_hosts" violates not-null constraint',
        'insert or update on table "memberships" violates foreign key constraint "fk_memberships_site_id_sites"',
        "UNIQUE constraint failed: memberships.account_id, memberships.site_id",
        'duplicate key value violates unique constraint "uix_account_site"\n'
        "DETAIL:  Key (account_id, site_id)=(email-owner, s2) already exists.",
    ])
    def test_guarded_column_names_outside_a_unique_violation_are_store_failures(self, text):
        assert isinstance(translate_integrity_error(integrity_error(text)), StoreFailure)

    def test_constraint_name_from_driver_diagnostics(self):
        orig = Exception("duplicate key value")
        orig.diag = Mock(constraint_name="uq_accounts_email")
        error = Mock()
        error.orig = orig

        result = translate_integrity_error(error)

        assert isinstance(result, ValidationError)
        assert result.message == "email taken"
