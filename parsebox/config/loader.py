"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ParseBoxConfig


def config_paths(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest priority first."""
    paths = [
        Path("./parsebox.yaml"),
        Path.home() / ".parsebox" / "config.yaml",
    ]
    if cli_path:
        paths.insert(0, Path(cli_path))
    return paths


def load_config(cli_path: str | None = None) -> ParseBoxConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_paths(cli_path):
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ValueError(f"Invalid config in {path}: expected a mapping at top level")
                raw = _expand_env_vars(raw)
                return ParseBoxConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return ParseBoxConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `parsebox config init`
DEFAULT_CONFIG_TEMPLATE = """\
# parsebox.yaml

# Conversion
conversion:
  default_source: "auto"       # auto | json | yaml | toml | ... (see `parsebox formats`)
  default_target: null         # null follows the detected source format
  indent: 2                    # JSON / JSON5 / XML / TOON indentation (1..8)
  xml_attribute_prefix: "@_"
  xml_text_key: "#text"
  csv_line_terminator: "\\n"    # "\\n" | "\\r\\n"

# Logging
log_level: "warn"              # debug | info | warn | error
log_format: "text"             # text | json
"""
