from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.assets import extract_archive, require_file
from ..pipeline import FailurePolicy, tolerated

logger = logging.getLogger(__name__)


class InstallNghdlStep:
    step_id = "50_install_nghdl"
    policy = FailurePolicy.SKIP_COMPONENT

    def run(self, ctx: RunContext) -> None:
        logger.info("Installing NGHDL...")
        archive = require_file(ctx.bundled(ctx.bundle.nghdl_zip), "NGHDL bundle")
        extract_archive(archive, ctx.install_root)

        nghdl_dir = ctx.bundled(ctx.bundle.nghdl_dir)
        script = require_file(nghdl_dir / ctx.bundle.nghdl_script, "NGHDL installer script")
        ctx.run(["chmod", "+x", script])

        # NGHDL reports its own errors; its exit status does not stop eSim.
        with tolerated(ctx, "NGHDL installer"):
            r = ctx.run([f"./{script.name}", "--install"], check=False, cwd=nghdl_dir)
            if r.returncode != 0:
                logger.warning("NGHDL installer exited with status %s", r.returncode)
            ctx.flags["nghdl_installed"] = True
