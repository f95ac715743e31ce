"""Generate TypeScript models, endpoints and React hooks from OpenAPI/Swagger specs."""

__version__ = "1.0.0"

from .codegen import GenerationSummary, generate  # noqa: E402
from .config import GeneratorConfig, load_config_file, merge_config  # noqa: E402
from .errors import CodegenError  # noqa: E402

__all__ = [
    "CodegenError",
    "GenerationSummary",
    "GeneratorConfig",
    "generate",
    "load_config_file",
    "merge_config",
]
