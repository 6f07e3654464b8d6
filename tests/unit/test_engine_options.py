"""Tests for database engine configuration."""

import ssl

import pytest

from src.charterhub.core.config import Settings
from src.charterhub.core.db.engine import build_ssl_context, engine_options

pytestmark = pytest.mark.unit

POSTGRES_URL = "postgresql+asyncpg://charterhub:secret@db:5432/charterhub"


def make_settings(**overrides) -> Settings:
    values = {"database_url": POSTGRES_URL, "jwt_secret_key": "k" * 40, **overrides}
    return Settings(**values)


class TestBuildSSLContext:
    def test_disable(self):
        assert build_ssl_context("disable") is None

    @pytest.mark.parametrize("mode", ["prefer", "require"])
    def test_encrypt_without_verification(self, mode):
        context = build_ssl_context(mode)
        assert context is not None
        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False

    def test_verify_ca(self):
        context = build_ssl_context("verify-ca")
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is False

    def test_verify_full(self):
        context = build_ssl_context("verify-full")
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True


class TestEngineOptions:
    def test_postgres_gets_pool_and_connect_args(self):
        options = engine_options(make_settings(database_ssl_mode="disable", database_pool_size=3))
        assert options["pool_size"] == 3
        assert options["pool_pre_ping"] is True
        assert options["connect_args"] == {"statement_cache_size": 100}

    def test_postgres_ssl_context_attached(self):
        options = engine_options(make_settings(database_ssl_mode="require"))
        assert isinstance(options["connect_args"]["ssl"], ssl.SSLContext)

    def test_sqlite_uses_defaults(self):
        assert engine_options(make_settings(database_url="sqlite+aiosqlite:///:memory:")) == {}


class TestSyncDatabaseURL:
    def test_derived_from_asyncpg(self):
        assert make_settings().sync_database_url == (
            "postgresql+psycopg2://charterhub:secret@db:5432/charterhub"
        )

    def test_explicit_migrations_url_wins(self):
        settings = make_settings(database_migrations_url="postgresql://migrator@db/charterhub")
        assert settings.sync_database_url == "postgresql://migrator@db/charterhub"
