from __future__ import annotations

import logging
from pathlib import Path

from ..context import RunContext
from ..lib.manifests import package_list, section
from ..lib.pkg import apt_install, apt_installed_version
from ..pipeline import FailurePolicy

logger = logging.getLogger(__name__)

DEFAULT_KICAD_VERSION = "6.0"


def kicad_config_dir(config_root: Path, version: str) -> Path:
    major = version.split(".", 1)[0]
    return config_root / f"{major}.0"


def detect_kicad_version(ctx: RunContext) -> str:
    default = str(section(ctx.manifest, "kicad").get("default_version") or DEFAULT_KICAD_VERSION)
    return apt_installed_version(ctx, "kicad") or default


class InstallKicadStep:
    step_id = "40_install_kicad"
    policy = FailurePolicy.ABORT

    def run(self, ctx: RunContext) -> None:
        logger.info("Installing KiCad...")
        apt_install(ctx, package_list(ctx.manifest, "kicad", "packages"), with_recommends=False)

        version = detect_kicad_version(ctx)
        ctx.kicad_version = version
        ctx.kicad_config_dir = kicad_config_dir(ctx.paths.kicad_config_root, version)
        ctx.export("KICAD_CONFIG_DIR", str(ctx.kicad_config_dir))

        logger.info("Detected KiCad version: %s (major: %s)", version, version.split(".", 1)[0])
        logger.info("Using KiCad configuration directory: %s", ctx.kicad_config_dir)
