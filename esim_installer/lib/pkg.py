from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from ..context import RunContext

logger = logging.getLogger(__name__)

_INSTALLED_RE = re.compile(r"Installed:\s*(?:\d+:)?(\d+\.\d+)")


def apt_update(ctx: RunContext) -> None:
    ctx.run(["apt-get", "update"], privileged=True)


def apt_install(
    ctx: RunContext,
    packages: Sequence[str],
    *,
    with_recommends: bool = True,
    command: str = "apt-get",
) -> None:
    if not packages:
        return
    argv = [command, "install", "-y"]
    if not with_recommends:
        argv.append("--no-install-recommends")
    ctx.run([*argv, *packages], privileged=True)


def apt_purge(ctx: RunContext, packages: Sequence[str]) -> None:
    if not packages:
        return
    ctx.run(["apt", "purge", "-y", *packages], privileged=True)


def parse_installed_version(policy_output: str) -> Optional[str]:
    """Extract ``major.minor`` from ``apt-cache policy`` output.

    Returns None when the package is not installed ("Installed: (none)").
    """
    m = _INSTALLED_RE.search(policy_output or "")
    return m.group(1) if m else None


def apt_installed_version(ctx: RunContext, package: str) -> Optional[str]:
    r = ctx.run(["apt-cache", "policy", package], check=False)
    if r.returncode != 0:
        return None
    return parse_installed_version(r.stdout)
