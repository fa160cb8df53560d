"""
Unit tests for dynamic middleware file editing.
"""

import pytest
import yaml

from traefik_hub.core.middlewares import (
    MiddlewareFile,
    add_middleware_to_config,
    get_cors_headers,
    update_cors_origins,
)
from traefik_hub.exceptions import MiddlewareConfigError


@pytest.fixture
def middleware_file(config_dir):
    return MiddlewareFile(config_dir / "dynamic" / "middlewares.yml")


class TestAddMiddlewareToConfig:
    def test_adds_to_existing_file(self):
        content = "http:\n  middlewares:\n    gzip:\n      compress: {}\n"

        addition = add_middleware_to_config(content, "my-rate-limit", "rateLimit", {"average": 100, "burst": 50})

        data = yaml.safe_load(addition.new_content)
        assert data["http"]["middlewares"]["gzip"] == {"compress": {}}
        assert data["http"]["middlewares"]["my-rate-limit"] == {"rateLimit": {"average": 100, "burst": 50}}
        assert addition.added_yaml.startswith("my-rate-limit:\n  rateLimit:")

    @pytest.mark.parametrize("content", ["", "http:\n", "http:\n  middlewares:\n"])
    def test_creates_missing_sections(self, content):
        addition = add_middleware_to_config(content, "gzip", "compress", {})

        assert yaml.safe_load(addition.new_content) == {"http": {"middlewares": {"gzip": {"compress": {}}}}}

    def test_duplicate_name(self):
        content = "http:\n  middlewares:\n    gzip:\n      compress: {}\n"

        with pytest.raises(MiddlewareConfigError) as exc_info:
            add_middleware_to_config(content, "gzip", "compress", {})

        assert str(exc_info.value) == "Middleware 'gzip' already exists. Remove it first or use a different name."

    @pytest.mark.parametrize("content", ["http: [unclosed", "- just\n- a list\n"])
    def test_unparseable(self, content):
        with pytest.raises(MiddlewareConfigError, match="Could not parse middlewares.yml"):
            add_middleware_to_config(content, "gzip", "compress", {})


class TestUpdateCorsOrigins:
    def test_add_and_remove(self):
        origins, changes = update_cors_origins(
            ["http://a.localhost", "http://b.localhost"],
            add=["http://c.localhost", "http://a.localhost"],
            remove=["http://b.localhost", "http://zzz.localhost"],
        )

        assert origins == ["http://a.localhost", "http://c.localhost"]
        assert changes == ["+ http://c.localhost", "- http://b.localhost"]

    def test_no_changes(self):
        assert update_cors_origins(["http://a.localhost"], add=["http://a.localhost"]) == (["http://a.localhost"], [])

    def test_add_then_remove_same_origin(self):
        origins, changes = update_cors_origins([], add=["http://x"], remove=["http://x"])

        assert origins == []
        assert changes == ["+ http://x", "- http://x"]


def test_get_cors_headers():
    data = {"http": {"middlewares": {"cors-dev": {"headers": {"accessControlAllowOriginList": []}}}}}

    assert get_cors_headers(data) == {"accessControlAllowOriginList": []}
    assert get_cors_headers({"http": {"middlewares": {}}}) is None
    assert get_cors_headers(None) is None


class TestMiddlewareFile:
    def test_add_middleware_writes_file(self, middleware_file):
        text = middleware_file.add_middleware("strip-api", "stripPrefix", {"prefixes": ["/api"]})

        assert text.startswith("# Middleware Added")
        assert "traefik.http.routers.myapp.middlewares=strip-api@file" in text
        data = yaml.safe_load(middleware_file.path.read_text())
        assert data["http"]["middlewares"]["strip-api"] == {"stripPrefix": {"prefixes": ["/api"]}}
        assert "cors-dev" in data["http"]["middlewares"]

    def test_add_middleware_duplicate_leaves_file(self, middleware_file):
        before = middleware_file.path.read_text()

        with pytest.raises(MiddlewareConfigError):
            middleware_file.add_middleware("cors-dev", "headers", {})

        assert middleware_file.path.read_text() == before

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(MiddlewareConfigError, match="Could not read"):
            MiddlewareFile(tmp_path / "missing.yml").read()

    def test_describe_cors(self, middleware_file):
        text = middleware_file.describe_cors()

        assert text.startswith("# CORS Configuration (cors-dev)")
        assert "- http://app.localhost" in text
        assert "GET, POST" in text
        assert "`cors-dev@file`" in text

    def test_describe_cors_without_middleware(self, tmp_path):
        path = tmp_path / "middlewares.yml"
        path.write_text("http:\n  middlewares: {}\n")

        assert MiddlewareFile(path).describe_cors() == "No cors-dev middleware found."

    def test_describe_cors_unreadable(self, tmp_path):
        assert MiddlewareFile(tmp_path / "missing.yml").describe_cors() == "Error: Could not read middlewares.yml"

    def test_update_cors(self, middleware_file):
        text = middleware_file.update_cors(add=["http://api.localhost"], remove=["http://app.localhost"])

        assert text.startswith("# CORS Updated")
        assert "`+ http://api.localhost`" in text
        assert "`- http://app.localhost`" in text
        headers = get_cors_headers(yaml.safe_load(middleware_file.path.read_text()))
        assert headers["accessControlAllowOriginList"] == ["http://api.localhost"]
        assert headers["accessControlAllowMethods"] == ["GET", "POST"]

    def test_update_cors_no_changes(self, middleware_file):
        before = middleware_file.path.read_text()

        text = middleware_file.update_cors(add=["http://app.localhost"])

        assert text == "No changes made (origins already in desired state)."
        assert middleware_file.path.read_text() == before

    def test_update_cors_missing_middleware(self, tmp_path):
        path = tmp_path / "middlewares.yml"
        path.write_text("http:\n  middlewares: {}\n")

        assert MiddlewareFile(path).update_cors(add=["http://x"]) == "Error: cors-dev middleware not found in middlewares.yml"
