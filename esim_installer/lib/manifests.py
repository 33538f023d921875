from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_MANIFEST = Path(__file__).resolve().parents[1] / "manifests" / "packages.yaml"


def load_manifest(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load the package manifest (apt/pip package lists, capability probes)."""

    p = Path(path) if path is not None else DEFAULT_MANIFEST
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return data


def section(manifest: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = manifest.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Manifest section {name!r} must be a mapping")
    return value


def package_list(manifest: Dict[str, Any], name: str, key: str) -> list[str]:
    pkgs = section(manifest, name).get(key) or []
    if not isinstance(pkgs, list):
        raise ValueError(f"Manifest {name}.{key} must be a list")
    return [str(p).strip() for p in pkgs if str(p).strip()]
