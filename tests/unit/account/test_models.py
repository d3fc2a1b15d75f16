"""Tests for account model serialization."""

from datetime import date

from playguard.core.modules.account.models import Account, AccountView


def make_account() -> Account:
    return Account(
        email="player@example.com",
        password_hash="$2b$12$hashed_password_here",
        name="Test",
        surname="Player",
        date_of_birth=date(1990, 5, 17),
        address="1 Main Street",
    )


class TestAccountMongo:
    """Tests for MongoDB document conversion."""

    def test_to_mongo_uses_underscore_id(self):
        account = make_account()
        data = account.to_mongo()
        assert data["_id"] == account.id
        assert "id" not in data

    def test_date_of_birth_stored_as_iso_string(self):
        data = make_account().to_mongo()
        assert data["date_of_birth"] == "1990-05-17"

    def test_document_round_trip(self):
        account = make_account()
        assert Account.from_mongo(account.to_mongo()) == account

    def test_from_mongo_passes_none(self):
        assert Account.from_mongo(None) is None


class TestAccountView:
    """Tests for the API representation."""

    def test_view_hides_password_hash(self):
        view = AccountView.from_domain(make_account())
        assert "password_hash" not in view.model_dump()
        assert view.active is False
