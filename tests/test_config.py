"""
Wallit Users — Settings Tests
==============================
"""

import pytest
from pydantic import ValidationError

from wallit.config import Settings
from wallit.database import migration_url


def make_settings(**overrides):
    """Settings without a .env file; explicit values beat the test environment."""
    values = {"database_url": None}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestDatabaseUrl:

    def test_assembled_from_parts(self):
        s = make_settings(
            db_host="db.internal", db_port=5433, db_name="accounts",
            db_user="svc", db_password="pw",
        )
        assert s.sqlalchemy_url == "postgresql+asyncpg://svc:pw@db.internal:5433/accounts"

    def test_explicit_url_wins(self):
        s = make_settings(database_url="sqlite+aiosqlite:///./x.db", db_name="ignored")
        assert s.sqlalchemy_url == "sqlite+aiosqlite:///./x.db"

    def test_missing_password_reported(self):
        with pytest.raises(ValueError, match="DB_PASSWORD"):
            make_settings(db_password="").validate_required_for_production()

    def test_password_present_passes(self):
        make_settings(db_password="pw").validate_required_for_production()


class TestOtherSettings:

    def test_log_level_normalized(self):
        assert make_settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(log_level="chatty")

    def test_hash_rounds_default(self):
        assert Settings.model_fields["password_hash_rounds"].default == 12

    def test_hash_rounds_bounded(self):
        with pytest.raises(ValidationError):
            make_settings(password_hash_rounds=3)

    def test_cors_origins_list(self):
        s = make_settings(cors_origins="http://a.test, http://b.test,")
        assert s.cors_origins_list == ["http://a.test", "http://b.test"]


class TestMigrationUrl:

    def test_defaults_to_settings(self):
        s = make_settings(database_url="sqlite+aiosqlite:///./x.db")
        assert migration_url(s) == "sqlite+aiosqlite:///./x.db"

    def test_override_wins(self):
        s = make_settings(database_url="sqlite+aiosqlite:///./x.db")
        assert migration_url(s, "sqlite+aiosqlite:///./other.db") == "sqlite+aiosqlite:///./other.db"

    def test_percent_escaped_for_config_parser(self):
        s = make_settings(database_url="postgresql+asyncpg://svc:p%40ss@db/accounts")
        assert migration_url(s) == "postgresql+asyncpg://svc:p%%40ss@db/accounts"
