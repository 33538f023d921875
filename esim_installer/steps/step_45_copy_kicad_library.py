from __future__ import annotations

import logging
import shutil

from ..context import RunContext
from ..lib.assets import extract_archive, require_file
from ..pipeline import FailurePolicy, tolerated

logger = logging.getLogger(__name__)


class CopyKicadLibraryStep:
    step_id = "45_copy_kicad_library"
    policy = FailurePolicy.SKIP_COMPONENT

    def run(self, ctx: RunContext) -> None:
        archive = require_file(ctx.bundled(ctx.bundle.kicad_library), "KiCad library archive")
        if ctx.kicad_config_dir is None:
            raise RuntimeError("KiCad configuration directory unknown; run the KiCad step first")

        extract_archive(archive, ctx.install_root)
        library_dir = ctx.bundled(ctx.bundle.kicad_library_dir)

        config_dir = ctx.kicad_config_dir
        if config_dir.is_dir():
            logger.info("KiCad config folder already exists at %s", config_dir)
        else:
            logger.info("%s does not exist, creating it", config_dir)
            config_dir.mkdir(parents=True, exist_ok=True)

        shutil.copy2(library_dir / "template" / "sym-lib-table", config_dir / "sym-lib-table")
        logger.info("Symbol table copied to %s", config_dir)

        symbols_src = library_dir / "eSim-symbols"
        symbols_dst = ctx.paths.kicad_symbols_dir
        if symbols_src.is_dir():
            ctx.run(["mkdir", "-p", symbols_dst], privileged=True)
            children = sorted(symbols_src.iterdir())
            if children:
                ctx.run(["cp", "-r", *children, symbols_dst], privileged=True)
            # The copy ran as root; hand the tree back to the user.
            ctx.run(["chown", "-R", ctx.owner, symbols_dst], privileged=True)
        else:
            logger.warning("eSim-symbols directory not found in %s", library_dir)

        with tolerated(ctx, f"removing {library_dir}"):
            ctx.run(["rm", "-rf", library_dir])
