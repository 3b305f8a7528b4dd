"""Tests for migrations/env_helpers.py DSN-to-URL conversion."""

from __future__ import annotations

import os
import sys

import pytest

# Make migrations importable without alembic context
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from migrations.env_helpers import dsn_to_url, get_database_url  # noqa: E402


@pytest.fixture(autouse=True)
def no_db_password(monkeypatch):
    monkeypatch.delenv("DB_PASSWORD", raising=False)


class TestDsnToUrl:
    def test_tcp_host(self):
        dsn = "dbname=hotels user=admin password=pw host=localhost port=5432"
        assert dsn_to_url(dsn) == "postgresql+psycopg2://admin:pw@localhost:5432/hotels"

    def test_no_port(self):
        dsn = "dbname=db user=u password=p host=myhost"
        assert dsn_to_url(dsn) == "postgresql+psycopg2://u:p@myhost/db"

    def test_socket_host_goes_to_query(self):
        dsn = "dbname=hotels user=svc password=s3cret host=/var/run/postgresql"
        result = dsn_to_url(dsn)
        assert result.startswith("postgresql+psycopg2://svc:s3cret@/hotels?host=")
        assert "postgresql" in result.split("?host=", 1)[1]

    def test_special_chars_encoded(self):
        dsn = "dbname=db user=u@domain password=p@ss host=h port=5432"
        result = dsn_to_url(dsn)
        assert "u%40domain" in result
        assert "p%40ss" in result

    def test_db_password_env_fallback(self, monkeypatch):
        monkeypatch.setenv("DB_PASSWORD", "from-env")
        result = dsn_to_url("dbname=db user=u host=h port=5432")
        assert result == "postgresql+psycopg2://u:from-env@h:5432/db"

    def test_dsn_password_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("DB_PASSWORD", "from-env")
        result = dsn_to_url("dbname=db user=u password=from-dsn host=h")
        assert "from-dsn" in result
        assert "from-env" not in result

    def test_postgres_url_input(self):
        assert dsn_to_url("postgres://u:p@h:5432/db") == "postgresql+psycopg2://u:p@h:5432/db"


class TestGetDatabaseUrl:
    def test_missing(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            get_database_url()

    def test_sqlalchemy_url_passthrough(self, monkeypatch):
        url = "postgresql+psycopg2://u:p@h/db"
        monkeypatch.setenv("DATABASE_URL", url)
        assert get_database_url() == url

    def test_dsn_converted(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "dbname=db user=u password=p host=h")
        assert get_database_url() == "postgresql+psycopg2://u:p@h/db"
