import pytest

from api.settings import ApiServerSettings
from shared.validators import parse_origins


class TestParseOrigins:
    def test_json_array_string(self):
        assert parse_origins('["http://a.com","https://b.com"]') == ["http://a.com", "https://b.com"]

    def test_comma_separated_with_whitespace_and_gaps(self):
        assert parse_origins(" http://a.com , ,https://b.com,") == ["http://a.com", "https://b.com"]

    def test_trailing_slash_dropped(self):
        assert parse_origins(["http://a.com/"]) == ["http://a.com"]

    def test_wildcard_allowed(self):
        assert parse_origins("*") == ["*"]

    def test_empty_means_no_origins(self):
        assert parse_origins("") == []
        assert parse_origins([]) == []

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError, match="Invalid JSON array"):
            parse_origins("[not valid json")

    def test_json_mixed_types_raises(self):
        with pytest.raises(ValueError, match="array of strings"):
            parse_origins('["http://a.com", 123]')

    def test_scheme_required(self):
        with pytest.raises(ValueError, match="http:// or https://"):
            parse_origins("a.com")


class TestApiServerSettings:
    def test_reads_prefixed_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOMMATCH_DATABASE_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("DOMMATCH_CORS_ORIGINS", "http://a.com,http://b.com")
        settings = ApiServerSettings()
        assert settings.database_path == str(tmp_path / "x.db")
        assert settings.cors_origins == ["http://a.com", "http://b.com"]

    def test_cors_origins_json_env(self, monkeypatch):
        monkeypatch.setenv("DOMMATCH_CORS_ORIGINS", '["https://app.example"]')
        assert ApiServerSettings().cors_origins == ["https://app.example"]

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DOMMATCH_DATABASE_PATH", raising=False)
        monkeypatch.delenv("DOMMATCH_CORS_ORIGINS", raising=False)
        settings = ApiServerSettings()
        assert settings.database_path.endswith("dommatch.db")
        assert settings.cors_origins == ["http://localhost:8081"]

    def test_empty_database_path_rejected(self):
        with pytest.raises(ValueError, match="database_path"):
            ApiServerSettings(database_path="")
