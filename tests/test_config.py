"""
Tests for configuration, credentials and parameter catalog.
"""

from pathlib import Path

import pytest

from hydrodb.config import (
    ClientConfig,
    WebServiceCredentials,
    default_hydat_path,
    hydat_dir,
)
from hydrodb.exceptions import AuthFailureError, InvalidArgumentError
from hydrodb.parameters import DEFAULT_PARAMETERS, lookup_parameter, param_id


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig()
        assert config.timeout == 60.0
        assert config.datamart_url.startswith("https://dd.weather.gc.ca")

    def test_override(self):
        assert ClientConfig(timeout=5).timeout == 5


class TestCredentials:
    """Test explicit credentials."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("WS_USRNM", "user")
        monkeypatch.setenv("WS_PWD", "secret")
        credentials = WebServiceCredentials.from_env()
        assert credentials.as_form() == {"username": "user", "password": "secret"}

    def test_from_env_missing(self, monkeypatch):
        monkeypatch.setenv("WS_USRNM", "user")
        monkeypatch.delenv("WS_PWD", raising=False)
        with pytest.raises(AuthFailureError, match="WS_PWD"):
            WebServiceCredentials.from_env()

    def test_repr_masks_password(self):
        assert "secret" not in repr(WebServiceCredentials("user", "secret"))

    def test_auth_error_mentions_token_limit(self):
        assert "5 tokens" in str(AuthFailureError("403 Forbidden."))


class TestHydatPath:
    def test_explicit(self, monkeypatch):
        monkeypatch.setenv("HYDAT_PATH", "/elsewhere/Hydat.sqlite3")
        assert default_hydat_path("/data/Hydat.sqlite3") == Path("/data/Hydat.sqlite3")

    def test_env(self, monkeypatch):
        monkeypatch.setenv("HYDAT_PATH", "/elsewhere/Hydat.sqlite3")
        assert default_hydat_path() == Path("/elsewhere/Hydat.sqlite3")

    def test_user_data_dir(self, monkeypatch, tmp_path):
        monkeypatch.delenv("HYDAT_PATH", raising=False)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert hydat_dir() == tmp_path / "hydrodb"
        assert default_hydat_path() == tmp_path / "hydrodb" / "Hydat.sqlite3"


class TestParameters:
    def test_catalog_frame(self):
        catalog = param_id()
        assert list(catalog.columns) == ["Parameter", "Code", "Unit", "Name_En", "Name_Fr"]
        assert sorted(catalog["Parameter"]) == sorted(DEFAULT_PARAMETERS)

    def test_lookup(self):
        assert lookup_parameter(47).code == "QR"

    def test_unknown(self):
        with pytest.raises(InvalidArgumentError, match="Unknown parameter"):
            lookup_parameter(999)
