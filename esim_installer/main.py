from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .context import PipelineMode, RunContext
from .errors import FatalFailure, UsageError
from .lib.command import Runner
from .lib.env import PATHS, Paths
from .lib.manifests import load_manifest
from .lib.prompt import ConsolePrompter, Prompter
from .logging_utils import configure_logging
from .pipeline import Step, run_pipeline
from .steps import (
    ConfigureProxyStep,
    CopyKicadLibraryStep,
    DesktopIntegrationStep,
    InstallDependenciesStep,
    InstallKicadStep,
    InstallNghdlStep,
    InstallSky130PdkStep,
    WriteConfigStep,
)
from .uninstall import run_uninstall, summarize

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2


def build_install_steps(prompter: Prompter) -> List[Step]:
    return [
        ConfigureProxyStep(prompter),
        WriteConfigStep(),
        InstallDependenciesStep(),
        InstallKicadStep(),
        CopyKicadLibraryStep(),
        InstallNghdlStep(),
        InstallSky130PdkStep(),
        DesktopIntegrationStep(),
    ]


def _install(ctx: RunContext, prompter: Prompter) -> int:
    try:
        result = run_pipeline(ctx=ctx, steps=build_install_steps(prompter))
    except FatalFailure as e:
        logger.debug("Installer failed at %s: %r", e.step_id, e.cause)
        logger.error("Error! Kindly resolve above error(s) and try again.")
        logger.error("Aborting Installation...")
        return EXIT_FATAL

    if result.skipped_steps:
        logger.warning("Skipped components: %s", summarize(result.skipped_steps))
    if ctx.report.tolerated:
        logger.warning("Completed with non-fatal errors in: %s", summarize(ctx.report.tolerated))
    logger.info("-----------------eSim Installed Successfully-----------------")
    logger.info('Type "%s" in Terminal to launch it', ctx.paths.launcher.name)
    logger.info('or double click on "eSim" icon placed on Desktop')
    return EXIT_OK


def run(
    mode: PipelineMode,
    *,
    install_root: Optional[Path] = None,
    paths: Paths = PATHS,
    log_path: Optional[str] = None,
    prompter: Optional[Prompter] = None,
    runner: Optional[Runner] = None,
    manifest_path: Optional[str] = None,
    use_sudo: Optional[bool] = None,
) -> int:
    """Install or uninstall eSim; returns the process exit code."""

    configure_logging(log_path=log_path or str(paths.log_file))

    ctx = RunContext(
        install_root=(install_root or Path.cwd()).resolve(),
        paths=paths,
        manifest=load_manifest(manifest_path),
    )
    if runner is not None:
        ctx.runner = runner
    if use_sudo is not None:
        ctx.use_sudo = use_sudo
    prompter = prompter or ConsolePrompter()

    logger.info("eSim %s (root=%s)", mode.value, ctx.install_root)
    try:
        if mode is PipelineMode.INSTALL:
            return _install(ctx, prompter)
        run_uninstall(ctx, prompter)
        return EXIT_OK
    except UsageError as e:
        logger.error("%s", e)
        return EXIT_USAGE


def parse_args(argv: Optional[list[str]] = None) -> PipelineMode:
    """Accept exactly one of ``--install`` or ``--uninstall``.

    Abbreviations, repeats and ``-h`` are usage errors.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    p = argparse.ArgumentParser(
        prog="install-eSim",
        description="Install or uninstall the eSim EDA suite.",
        allow_abbrev=False,
        add_help=False,
    )
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--install", action="store_true", help="Install eSim and its components")
    group.add_argument("--uninstall", action="store_true", help="Remove eSim and its components")
    if len(argv) != 1:
        p.error("expected exactly one of --install or --uninstall")
    args = p.parse_args(argv)
    return PipelineMode.INSTALL if args.install else PipelineMode.UNINSTALL


def main(argv: Optional[list[str]] = None) -> int:
    mode = parse_args(argv)
    return run(mode)
