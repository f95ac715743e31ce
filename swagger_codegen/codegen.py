"""Render templates and write generated output.

Runs one generation pass: load the document, generate model files, then render
the endpoint, axios config, hook and index files from the contexts built
by context_builder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jinja2

from .catalog import Operation, build_catalog, count_operations
from .config import GeneratorConfig
from .context_builder import build_index_context, build_tag_context, hook_context
from .dependencies import check_peer_dependencies
from .loader import RefResolver, load_spec
from .models import ModelGenerator, ModelSet
from .writer import FileWriter, WriteOutcome

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


@dataclass
class GenerationSummary:
    """What one generate() run produced."""

    tags: int = 0
    operations: int = 0
    declarations: int = 0
    files: list[tuple[Path, WriteOutcome]] = field(default_factory=list)

    def count(self, outcome: WriteOutcome) -> int:
        return sum(1 for _, result in self.files if result is outcome)


def create_environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


class _Output:
    """Renders templates and writes them below the output directory."""

    def __init__(self, config: GeneratorConfig, summary: GenerationSummary) -> None:
        self.env = create_environment()
        self.writer = FileWriter(config.output_dir)
        self.summary = summary

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        return self.env.get_template(template_name).render(**context)

    def write(self, relative_path: str, content: str, append: bool = False) -> WriteOutcome:
        outcome = self.writer.write(relative_path, content, append=append)
        self.summary.files.append((self.writer.base_dir / relative_path, outcome))
        return outcome


def generate(
    config: GeneratorConfig,
    spec: dict[str, Any] | None = None,
    project_dir: str | Path | None = None,
) -> GenerationSummary:
    """Run a full generation pass and return what was written."""
    if not (config.hooks.skip_dependency_check or config.axios_config.skip_dependency_check):
        check_peer_dependencies(config, project_dir)

    if spec is None:
        spec = load_spec(config.swagger_url)

    catalog = build_catalog(spec, config.strip_paths)
    summary = GenerationSummary(tags=len(catalog), operations=count_operations(catalog))
    logger.info("Found %d tags with %d endpoints", summary.tags, summary.operations)

    refs = RefResolver(spec)
    models = ModelGenerator(spec, refs).generate(catalog)
    summary.declarations = models.declaration_count
    logger.debug("Reference cache: %d pointers, %d hits", len(refs), refs.hits)

    out = _Output(config, summary)
    _write_models(out, config, models)

    tag_contexts = {
        tag: build_tag_context(tag, operations, models, config)
        for tag, operations in catalog.items()
    }
    _write_endpoints(out, config, tag_contexts)

    if config.axios_config.generate_axios_config:
        _write_axios_config(out, config)

    if config.hooks.generate_hooks:
        _write_hooks(out, config, models, tag_contexts)

    if config.generate_index:
        _write_indexes(out, config, catalog, models)

    return summary


def _write_models(out: _Output, config: GeneratorConfig, models: ModelSet) -> None:
    logger.info("Generating models...")
    for module in models.declarations:
        out.write(f"{config.models_dir}/{module}.ts", models.render(module), append=True)


def _write_endpoints(out: _Output, config: GeneratorConfig, tag_contexts: dict[str, dict[str, Any]]) -> None:
    logger.info("Generating endpoint definitions...")
    for tag, context in tag_contexts.items():
        out.write(f"{config.endpoints_dir}/{tag}.ts", out.render("endpoints.ts.j2", context))


def _write_axios_config(out: _Output, config: GeneratorConfig) -> None:
    logger.info("Generating axios config...")
    options = config.axios_config
    context = {
        "base_url": options.base_url_placeholder,
        "include_interceptors": options.include_interceptors,
    }
    base = options.axios_config_path
    out.write(f"{base}/axiosInstance.ts", out.render("axios_instance.ts.j2", context))
    out.write(f"{base}/types.ts", out.render("axios_types.ts.j2", context))


def _write_hooks(
    out: _Output,
    config: GeneratorConfig,
    models: ModelSet,
    tag_contexts: dict[str, dict[str, Any]],
) -> None:
    options = config.hooks
    logger.info(
        "Generating React hooks (%s, %s)...",
        options.hook_pattern, "fetch" if options.use_fetch else "axios",
    )
    for tag, context in tag_contexts.items():
        if options.hook_pattern == "combined":
            out.write(
                f"{options.hooks_dir}/{tag}/{context['combined_hook_name']}.ts",
                out.render("hooks_combined.ts.j2", context),
            )
            continue
        for entry in context["operations"]:
            out.write(
                f"{options.hooks_dir}/{tag}/{entry['hook_name']}.ts",
                out.render("hook.ts.j2", hook_context(context, entry, models, config)),
            )


def _write_indexes(
    out: _Output,
    config: GeneratorConfig,
    catalog: dict[str, list[Operation]],
    models: ModelSet,
) -> None:
    logger.info("Generating index files...")
    context = build_index_context(catalog, models)
    out.write(f"{config.models_dir}/index.ts", out.render("models_index.ts.j2", context))
    out.write(f"{config.endpoints_dir}/index.ts", out.render("endpoints_index.ts.j2", context))
