"""Tests for the command line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from swagger_codegen import __version__
from swagger_codegen.cli import main


class TestCli:

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["-h"])
        assert result.exit_code == 0
        assert "SOURCE" in result.output
        assert "--strip-base-path" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["-v"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_generate(self, tmp_path, spec_file):
        runner = CliRunner()
        out = tmp_path / "out"
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, [str(spec_file), "-o", str(out), "--strip-base-path", "/api/v1"])
        assert result.exit_code == 0, result.output
        assert "Endpoints: 5" in result.output
        assert "Model declarations: 7" in result.output
        assert (out / "endpoints" / "widgets.ts").is_file()
        assert (out / "hooks" / "widgets" / "useGetWidgets.ts").is_file()

    def test_options_override(self, tmp_path, spec_file):
        runner = CliRunner()
        out = tmp_path / "out"
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, [
                str(spec_file), "-o", str(out), "-m", "types", "--strip", "/api/v1",
                "--hook-pattern", "combined", "--no-index", "--no-axios-config",
            ])
        assert result.exit_code == 0, result.output
        assert (out / "types" / "widget.ts").is_file()
        assert (out / "hooks" / "widgets" / "useWidgets.ts").is_file()
        assert not (out / "types" / "index.ts").exists()
        assert not (out / "config").exists()

    def test_config_file(self, tmp_path, spec_file):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path) as cwd:
            Path(cwd, "swagger-codegen.config.json").write_text(json.dumps({
                "swaggerUrl": str(spec_file),
                "outputDir": "./generated",
                "hooks": {"generateHooks": False},
            }), encoding="utf-8")
            result = runner.invoke(main, ["-e", "routes"])
            assert result.exit_code == 0, result.output
            assert Path(cwd, "generated", "routes", "index.ts").is_file()
            assert not Path(cwd, "generated", "hooks").exists()

    def test_cli_flag_beats_config_file(self, tmp_path, spec_file):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path) as cwd:
            Path(cwd, "swagger-codegen.config.json").write_text(json.dumps({
                "swaggerUrl": str(spec_file),
                "outputDir": "./generated",
                "hooks": {"generateHooks": False},
            }), encoding="utf-8")
            result = runner.invoke(main, ["--hooks"])
            assert result.exit_code == 0, result.output
            assert Path(cwd, "generated", "hooks").is_dir()

    def test_missing_source(self, tmp_path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, [])
        assert result.exit_code == 1
        assert "Swagger URL is required" in result.output

    def test_missing_file(self, tmp_path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, [str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_bad_choice(self, spec_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(spec_file), "--hook-pattern", "bundled"])
        assert result.exit_code == 2
