from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from ..context import RunContext
from ..lib.desktop import mark_trusted, render_desktop_entry, render_launcher
from ..pipeline import FailurePolicy, tolerated

logger = logging.getLogger(__name__)


def _write_executable(path: Path, contents: str) -> None:
    path.write_text(contents, encoding="utf-8")
    path.chmod(0o755)


class DesktopIntegrationStep:
    step_id = "70_desktop_integration"
    policy = FailurePolicy.ABORT

    def run(self, ctx: RunContext) -> None:
        paths = ctx.paths
        frontend_dir = ctx.bundled(ctx.bundle.frontend_dir)

        with tempfile.TemporaryDirectory(prefix="esim-desktop-") as tmp:
            launcher = Path(tmp) / "esim-start.sh"
            _write_executable(launcher, render_launcher(frontend_dir=frontend_dir, venv_dir=paths.venv_dir))
            ctx.run(["mkdir", "-p", paths.launcher.parent], privileged=True)
            ctx.run(["cp", "-vp", launcher, paths.launcher], privileged=True)

            entry = Path(tmp) / paths.desktop_file_name
            _write_executable(
                entry,
                render_desktop_entry(
                    command=paths.launcher.name,
                    icon=paths.config_dir / "logo.png",
                    working_dir=frontend_dir,
                ),
            )
            ctx.run(["mkdir", "-p", paths.applications_dir], privileged=True)
            ctx.run(["cp", "-vp", entry, paths.system_desktop_entry], privileged=True)

            paths.user_desktop_dir.mkdir(parents=True, exist_ok=True)
            ctx.run(["cp", "-vp", entry, paths.user_desktop_entry])

        with tolerated(ctx, "trusting desktop launcher"):
            mark_trusted(ctx, paths.user_desktop_entry)
        with tolerated(ctx, "making desktop launcher executable"):
            ctx.run(["chmod", "a+x", paths.user_desktop_entry])

        logo = ctx.bundled(ctx.bundle.logo)
        if logo.is_file():
            paths.config_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(logo, paths.config_dir / "logo.png")
        else:
            logger.warning("Logo image not found at %s. Icon may not display correctly.", logo)

        logger.info("Launcher installed at %s", paths.launcher)
