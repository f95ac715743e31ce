"""Entry point: python -m swagger_codegen <spec> [options]"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main(prog_name="swagger-codegen")
