from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.assets import extract_archive, require_file
from ..pipeline import FailurePolicy

logger = logging.getLogger(__name__)


class InstallSky130PdkStep:
    step_id = "60_install_sky130_pdk"
    policy = FailurePolicy.SKIP_COMPONENT

    def run(self, ctx: RunContext) -> None:
        logger.info("Installing SKY130 PDK...")
        archive = require_file(ctx.bundled(ctx.bundle.sky130_archive), "SKY130 PDK archive")
        extract_archive(archive, ctx.install_root)

        extracted = ctx.bundled(ctx.paths.pdk_name)
        dest = ctx.paths.pdk_dir

        ctx.run(["rm", "-rf", dest], privileged=True)

        logger.info("Copying SKY130 PDK to %s", dest)
        ctx.run(["mkdir", "-p", ctx.paths.pdk_parent], privileged=True)
        ctx.run(["mv", extracted, ctx.paths.pdk_parent], privileged=True)
        ctx.run(["chown", "-R", ctx.owner, dest], privileged=True)
