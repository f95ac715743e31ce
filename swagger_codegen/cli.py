"""CLI entry point for swagger-codegen."""

from __future__ import annotations

import logging
from typing import Any

import click
from click.core import ParameterSource

from . import __version__
from .codegen import generate
from .config import load_config_file, merge_config
from .errors import CodegenError
from .writer import WriteOutcome

# CLI option -> config key path
_OPTION_KEYS: dict[str, tuple[str, ...]] = {
    "output": ("output_dir",),
    "models": ("models_dir",),
    "endpoints": ("endpoints_dir",),
    "strip_base_path": ("strip_base_path",),
    "index": ("generate_index",),
    "axios_config": ("axios_config", "generate_axios_config"),
    "hooks": ("hooks", "generate_hooks"),
    "hooks_dir": ("hooks", "hooks_dir"),
    "hook_pattern": ("hooks", "hook_pattern"),
    "fetch": ("hooks", "use_fetch"),
    "headers": ("hooks", "include_headers"),
}


def _overrides(ctx: click.Context, source: str | None, options: dict[str, Any]) -> dict[str, Any]:
    """Config overrides for the options given on the command line only."""
    overrides: dict[str, Any] = {"swagger_url": source}
    for name, keys in _OPTION_KEYS.items():
        if ctx.get_parameter_source(name) in (None, ParameterSource.DEFAULT):
            continue
        value = options[name]
        if isinstance(value, tuple):
            value = list(value)
        target = overrides
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value
    return overrides


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("source", required=False)
@click.option("-o", "--output", help="Output directory (default: ./src/generated).")
@click.option("-m", "--models", help="Models subdirectory (default: models).")
@click.option("-e", "--endpoints", help="Endpoints subdirectory (default: endpoints).")
@click.option("--hooks-dir", help="Hooks subdirectory (default: hooks).")
@click.option("--strip-base-path", "--strip", multiple=True, help="Base path prefix to strip from paths. Repeatable.")
@click.option("--hook-pattern", type=click.Choice(["separate", "combined"]), help="One hook per operation, or one per tag.")
@click.option("--fetch/--axios", default=False, help="Use fetch instead of axios in hooks.")
@click.option("--hooks/--no-hooks", default=True, help="Generate React hooks.")
@click.option("--headers/--no-headers", default=True, help="Accept extra request headers in hooks.")
@click.option("--axios-config/--no-axios-config", default=True, help="Generate the axios instance module.")
@click.option("--index/--no-index", default=True, help="Generate index files.")
@click.option("-c", "--config", "config_path", help="Path to config file.")
@click.option("--verbose", is_flag=True, help="Debug logging.")
@click.version_option(__version__, "-v", "--version", prog_name="swagger-codegen")
@click.pass_context
def main(ctx: click.Context, source: str | None, config_path: str | None, verbose: bool, **options: Any) -> None:
    """Generate TypeScript models, endpoints and React hooks from an OpenAPI/Swagger spec.

    SOURCE is a URL or path to the OpenAPI document; it may instead come from a config file.
    """
    _configure_logging(verbose)
    try:
        config = merge_config(load_config_file(config_path), _overrides(ctx, source, options))
        summary = generate(config)
    except CodegenError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo("Code generation completed.")
    click.echo(f"  Output directory: {config.output_dir}")
    click.echo(f"  Tags: {summary.tags}")
    click.echo(f"  Endpoints: {summary.operations}")
    click.echo(f"  Model declarations: {summary.declarations}")
    click.echo(
        f"  Files: {summary.count(WriteOutcome.CREATED)} created, "
        f"{summary.count(WriteOutcome.UPDATED)} updated, "
        f"{summary.count(WriteOutcome.SKIPPED)} unchanged"
    )
