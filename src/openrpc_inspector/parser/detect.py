"""Auto-detect API documentation format."""

from pathlib import Path

import yaml


def detect_format(file_path: Path) -> str:
    """Detect the format of an API documentation file.

    Returns: 'openrpc' or 'unknown'.
    """
    text = file_path.read_text(encoding="utf-8")

    # YAML is a superset of JSON, so this covers both
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        return "unknown"

    if isinstance(data, dict) and "openrpc" in data and "methods" in data:
        return "openrpc"
    return "unknown"
