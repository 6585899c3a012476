"""
Config loader for the PML report.

All configuration lives in the configs/ directory as YAML files. The pipeline
script loads its settings through this module so there's one place to look
when a seed, a path or a grid needs changing.

Usage:

    from pml_report.config import load_config

    cfg = load_config("analysis")
    seed = cfg["partition"]["seed"]
    candidates = cfg["cross_validation"]["candidates"]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

# Resolve the configs/ directory relative to this file so the package works
# regardless of the working directory the caller uses.
_CONFIGS_DIR = Path(__file__).parent.parent / "configs"


def load_config(name: str, configs_dir: Path | str | None = None) -> dict[str, Any]:
    """
    Load a named YAML config file.

    Args:
        name: Config file name without the .yaml extension (e.g. "analysis").
        configs_dir: Directory to look in. Defaults to the project's configs/.

    Returns:
        The parsed YAML contents as a nested dictionary.

    Raises:
        FileNotFoundError: If <configs_dir>/<name>.yaml does not exist.
        yaml.YAMLError: If the file contains invalid YAML.
    """
    base = Path(configs_dir) if configs_dir is not None else _CONFIGS_DIR
    path = base / f"{name}.yaml"
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            f"Expected one of: {[p.stem for p in base.glob('*.yaml')]}"
        )
    with path.open(encoding="utf-8") as f:
        return yaml.safe_load(f) or {}
