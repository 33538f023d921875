from __future__ import annotations

import configparser
import logging
from pathlib import Path

from ..context import RunContext
from ..pipeline import FailurePolicy

logger = logging.getLogger(__name__)

SECTION = "eSim"
ROOT_KEY = "eSim_HOME"

# Paths below the install root, written as interpolations of eSim_HOME so the
# file stays valid if the tree is moved and eSim_HOME edited.
RELATIVE_ENTRIES = {
    "LICENSE": "LICENSE",
    "KicadLib": "library/kicadLibrary.tar.xz",
    "IMAGES": "images",
    "VERSION": "VERSION",
    "MODELICA_MAP_JSON": "library/ngspicetoModelica/Mapping.json",
}


def render_config(install_root: Path) -> configparser.ConfigParser:
    parser = configparser.ConfigParser()
    parser.optionxform = str  # type: ignore[assignment]
    parser[SECTION] = {ROOT_KEY: str(install_root).replace("%", "%%")}
    for key, rel in RELATIVE_ENTRIES.items():
        parser[SECTION][key] = f"%({ROOT_KEY})s/{rel}"
    return parser


def write_config(config_file: Path, install_root: Path) -> None:
    """(Re)create ``config_file`` from scratch; any prior copy is discarded."""

    config_file.parent.mkdir(parents=True, exist_ok=True)
    if config_file.exists():
        config_file.unlink()

    with config_file.open("w", encoding="utf-8") as f:
        render_config(install_root).write(f)


class WriteConfigStep:
    step_id = "20_write_config"
    policy = FailurePolicy.ABORT

    def run(self, ctx: RunContext) -> None:
        write_config(ctx.paths.config_file, ctx.install_root)
        logger.info("Wrote %s (eSim_HOME=%s)", ctx.paths.config_file, ctx.install_root)
