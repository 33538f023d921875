from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..context import RunContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapabilityProbe:
    """Try to use a capability; install ``fallback`` when the attempt fails.

    The probe is a Python snippet run by the environment's interpreter.
    Interpreter version numbers are deliberately not consulted.
    """

    name: str
    probe: str
    fallback: List[str]

    @classmethod
    def from_manifest(cls, raw: Dict[str, Any]) -> "CapabilityProbe":
        return cls(
            name=str(raw["name"]),
            probe=str(raw["probe"]),
            fallback=[str(p) for p in raw.get("fallback") or []],
        )


def venv_bin(venv_dir: Path, exe: str) -> Path:
    return venv_dir / "bin" / exe


def create_venv(ctx: RunContext, venv_dir: Path) -> None:
    ctx.run(["virtualenv", venv_dir])


def pip_install(ctx: RunContext, venv_dir: Path, packages: Sequence[str], *, upgrade: bool = False) -> None:
    if not packages:
        return
    argv: list[str] = [str(venv_bin(venv_dir, "pip")), "install"]
    if upgrade:
        argv.append("--upgrade")
    ctx.run([*argv, *packages])


def python_version(ctx: RunContext, venv_dir: Path) -> Optional[str]:
    """Return ``major.minor`` reported by the environment's interpreter."""
    r = ctx.run([venv_bin(venv_dir, "python3"), "--version"], check=False)
    out = (r.stdout or r.stderr or "").strip()
    parts = out.split()
    if r.returncode != 0 or len(parts) < 2:
        return None
    return ".".join(parts[1].split(".")[:2])


def ensure_capability(ctx: RunContext, venv_dir: Path, cap: CapabilityProbe) -> bool:
    """Probe ``cap``; install its fallback on failure.

    Returns True when the fallback was installed.
    """
    r = ctx.run([venv_bin(venv_dir, "python3"), "-c", cap.probe], check=False)
    if r.returncode == 0:
        logger.info("%s is already available in Python.", cap.name)
        return False
    logger.info("%s not found, installing %s in virtualenv...", cap.name, " ".join(cap.fallback))
    pip_install(ctx, venv_dir, cap.fallback)
    return True
