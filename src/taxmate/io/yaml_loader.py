"""YAML data file loader for tax-year rule tables."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def load_yaml(path: Path) -> Any:
    """Load and parse a YAML file.

    Args:
        path: Absolute or relative path to the YAML file.

    Returns:
        Parsed YAML content (typically a dict or list).

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_package_yaml(relative_path: str) -> Any:
    """Load a YAML file relative to the taxmate package root.

    Args:
        relative_path: Path relative to ``src/taxmate/``,
            e.g. ``"taxes/tables/au_2024_25.yaml"``.

    Returns:
        Parsed YAML content.
    """
    return load_yaml(PACKAGE_ROOT / relative_path)
