"""Tests for configuration loading and merging."""

import json
from pathlib import Path

import pytest

from swagger_codegen.config import GeneratorConfig, load_config_file, merge_config
from swagger_codegen.errors import ConfigError


class TestDefaults:

    def test_defaults(self):
        config = GeneratorConfig(swagger_url="spec.json")
        assert config.output_dir == "./src/generated"
        assert config.models_dir == "models"
        assert config.endpoints_dir == "endpoints"
        assert config.generate_index is True
        assert config.strip_base_path is None
        assert config.axios_config.generate_axios_config is True
        assert config.axios_config.axios_config_path == "config"
        assert config.axios_config.base_url_placeholder == "process.env.REACT_APP_API_URL"
        assert config.axios_config.include_interceptors is True
        assert config.hooks.generate_hooks is True
        assert config.hooks.hooks_dir == "hooks"
        assert config.hooks.hook_pattern == "separate"
        assert config.hooks.include_headers is True
        assert config.hooks.use_fetch is False

    def test_derived_paths(self):
        config = GeneratorConfig(swagger_url="spec.json", output_dir="out")
        assert config.models_path == Path("out/models")
        assert config.endpoints_path == Path("out/endpoints")
        assert config.hooks_path == Path("out/hooks")
        assert config.axios_config_dir == Path("out/config")

    def test_strip_paths(self):
        assert GeneratorConfig(swagger_url="s").strip_paths == []
        assert GeneratorConfig(swagger_url="s", strip_base_path="/v1").strip_paths == ["/v1"]
        assert GeneratorConfig(swagger_url="s", strip_base_path=["/v1", "/api"]).strip_paths == ["/v1", "/api"]


class TestLoadConfigFile:

    def test_discovers_json(self, tmp_path):
        (tmp_path / "swagger-codegen.config.json").write_text(
            json.dumps({"swaggerUrl": "spec.json"}), encoding="utf-8",
        )
        assert load_config_file(cwd=tmp_path) == {"swaggerUrl": "spec.json"}

    def test_discovers_yaml(self, tmp_path):
        (tmp_path / "swagger-codegen.config.yaml").write_text(
            "swaggerUrl: spec.yaml\nhooks:\n  hookPattern: combined\n", encoding="utf-8",
        )
        data = load_config_file(cwd=tmp_path)
        assert data == {"swaggerUrl": "spec.yaml", "hooks": {"hookPattern": "combined"}}

    def test_none_found(self, tmp_path):
        assert load_config_file(cwd=tmp_path) is None

    def test_explicit_path(self, tmp_path):
        (tmp_path / "custom.yml").write_text("swaggerUrl: x.json\n", encoding="utf-8")
        assert load_config_file("custom.yml", cwd=tmp_path) == {"swaggerUrl": "x.json"}

    def test_explicit_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config_file("nope.json", cwd=tmp_path)

    def test_unsupported_format(self, tmp_path):
        (tmp_path / "config.js").write_text("export default {}", encoding="utf-8")
        with pytest.raises(ConfigError, match="Unsupported config file format"):
            load_config_file("config.js", cwd=tmp_path)

    def test_invalid_json(self, tmp_path):
        (tmp_path / "swagger-codegen.config.json").write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config_file(cwd=tmp_path)

    def test_not_a_mapping(self, tmp_path):
        (tmp_path / "swagger-codegen.config.yml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config_file(cwd=tmp_path)

    def test_empty_yaml(self, tmp_path):
        (tmp_path / "swagger-codegen.config.yml").write_text("", encoding="utf-8")
        assert load_config_file(cwd=tmp_path) == {}


class TestMergeConfig:

    def test_camel_case_file_keys(self):
        config = merge_config({
            "swaggerUrl": "spec.json",
            "outputDir": "./out",
            "stripBasePath": "/v1",
            "hooks": {"hookPattern": "combined", "useFetch": True},
            "axiosConfig": {"includeInterceptors": False},
        })
        assert config.output_dir == "./out"
        assert config.strip_base_path == "/v1"
        assert config.hooks.hook_pattern == "combined"
        assert config.hooks.use_fetch is True
        assert config.axios_config.include_interceptors is False

    def test_overrides_win(self):
        config = merge_config(
            {"swaggerUrl": "file.json", "outputDir": "./from-file", "hooks": {"hooksDir": "h", "useFetch": True}},
            {"swagger_url": "cli.json", "hooks": {"use_fetch": False}},
        )
        assert config.swagger_url == "cli.json"
        assert config.output_dir == "./from-file"
        assert config.hooks.hooks_dir == "h"
        assert config.hooks.use_fetch is False

    def test_none_overrides_ignored(self):
        config = merge_config({"swaggerUrl": "file.json"}, {"swagger_url": None, "output_dir": None})
        assert config.swagger_url == "file.json"
        assert config.output_dir == "./src/generated"

    def test_missing_source(self):
        with pytest.raises(ConfigError, match="Swagger URL is required"):
            merge_config(None, {"output_dir": "./out"})

    def test_invalid_value(self):
        with pytest.raises(ConfigError, match="Invalid configuration"):
            merge_config({"swaggerUrl": "s.json", "hooks": {"hookPattern": "bundled"}})
