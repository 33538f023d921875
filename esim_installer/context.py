from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .lib.command import CmdResult, Runner, run_cmd
from .lib.env import BUNDLE, PATHS, Bundle, Paths

logger = logging.getLogger(__name__)


class PipelineMode(enum.Enum):
    INSTALL = "install"
    UNINSTALL = "uninstall"


@dataclass(frozen=True)
class ProxyCredentials:
    hostname: str
    port: str
    username: str
    password: str = field(repr=False)

    @property
    def url(self) -> str:
        return f"http://{self.username}:{self.password}@{self.hostname}:{self.port}"


@dataclass
class RunReport:
    tolerated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)


def invoking_owner() -> str:
    """uid:gid of the user who started the run, looking through sudo."""
    uid = os.environ.get("SUDO_UID") or str(os.getuid())
    gid = os.environ.get("SUDO_GID") or str(os.getgid())
    return f"{uid}:{gid}"


@dataclass
class RunContext:
    """Everything one run shares between steps.

    Child commands see ``env`` rather than os.environ; proxy settings and
    the activated virtualenv are recorded there.
    """

    install_root: Path
    paths: Paths = PATHS
    bundle: Bundle = BUNDLE
    manifest: Dict[str, Any] = field(default_factory=dict)
    env: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    runner: Runner = run_cmd
    use_sudo: bool = field(default_factory=lambda: os.geteuid() != 0)
    owner: str = field(default_factory=invoking_owner)
    proxy: Optional[ProxyCredentials] = None
    kicad_version: Optional[str] = None
    kicad_config_dir: Optional[Path] = None
    flags: Dict[str, bool] = field(default_factory=dict)
    report: RunReport = field(default_factory=RunReport)

    def bundled(self, rel: str) -> Path:
        return self.install_root / rel

    def run(
        self,
        argv: Sequence[str | os.PathLike],
        *,
        check: bool = True,
        cwd: str | os.PathLike | None = None,
        privileged: bool = False,
    ) -> CmdResult:
        argv_list = [str(a) for a in argv]
        if privileged and self.use_sudo:
            # -E keeps proxy settings for apt behind sudo.
            argv_list = ["sudo", "-E", *argv_list]
        return self.runner(
            argv_list,
            check=check,
            env=self.env,
            cwd=str(cwd) if cwd is not None else None,
        )

    def activate_venv(self, venv_dir: Path) -> None:
        self.env["VIRTUAL_ENV"] = str(venv_dir)
        self.env["PATH"] = os.pathsep.join([str(venv_dir / "bin"), self.env.get("PATH", os.defpath)])
        self.env.pop("PYTHONHOME", None)
        logger.info("Activated virtual environment %s", venv_dir)

    def export(self, name: str, value: str) -> None:
        self.env[name] = value
