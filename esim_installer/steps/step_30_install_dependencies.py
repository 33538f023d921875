from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.manifests import package_list
from ..lib.pkg import apt_install, apt_update
from ..lib.venv import CapabilityProbe, create_venv, ensure_capability, pip_install, python_version
from ..pipeline import FailurePolicy, tolerated

logger = logging.getLogger(__name__)


class InstallDependenciesStep:
    step_id = "30_install_dependencies"
    policy = FailurePolicy.ABORT

    def run(self, ctx: RunContext) -> None:
        manifest = ctx.manifest
        venv_dir = ctx.paths.venv_dir

        logger.info("Updating apt index files...")
        with tolerated(ctx, "apt index refresh"):
            apt_update(ctx)

        logger.info("Installing virtualenv...")
        apt_install(ctx, package_list(manifest, "system", "bootstrap"), command="apt")

        logger.info("Creating virtual environment at %s", venv_dir)
        create_venv(ctx, venv_dir)
        ctx.activate_venv(venv_dir)

        logger.info("Upgrading pip...")
        pip_install(ctx, venv_dir, ["pip"], upgrade=True)

        logger.info("Installing basic system packages...")
        apt_install(ctx, package_list(manifest, "system", "base"))

        version = python_version(ctx, venv_dir)
        logger.info("Detected Python version: %s", version or "unknown")

        for raw in manifest.get("capabilities") or []:
            ensure_capability(ctx, venv_dir, CapabilityProbe.from_manifest(raw))

        logger.info("Installing pip3...")
        apt_install(ctx, package_list(manifest, "system", "pip"), command="apt")

        logger.info("Installing Python packages in virtualenv...")
        pip_install(ctx, venv_dir, package_list(manifest, "python", "packages"))

        for url in package_list(manifest, "python", "source_urls"):
            logger.info("Installing %s", url)
            pip_install(ctx, venv_dir, [url], upgrade=True)
