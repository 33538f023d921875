"""Best-effort removal of an eSim installation.

Presence of every artifact is sampled once, before anything is removed, in
an :class:`InstalledComponents` snapshot. Reversal steps consult only the
snapshot; an artifact that is already gone is reported as a gap, never as
an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .context import RunContext
from .lib.manifests import package_list
from .lib.pkg import apt_installed_version, apt_purge
from .lib.prompt import Prompter, ask_yes_no
from .pipeline import FailurePolicy, PipelineResult, Step, run_pipeline, tolerated
from .steps.step_40_install_kicad import kicad_config_dir

logger = logging.getLogger(__name__)

CONFIRM_QUESTION = (
    "Are you sure? It will remove eSim completely including KiCad, Makerchip, NGHDL "
    "and SKY130 PDK along with their models and libraries (y/n): "
)


@dataclass(frozen=True)
class InstalledComponents:
    config_dir: bool
    venv: bool
    launcher: bool
    system_desktop_entry: bool
    user_desktop_entry: bool
    kicad_version: Optional[str]
    kicad_config_dir: Optional[Path]
    kicad_share_dir: bool
    kicad_apt_sources: Tuple[Path, ...]
    pdk: bool
    nghdl_dir: bool
    model_param_dirs: Tuple[Path, ...]

    @classmethod
    def detect(cls, ctx: RunContext) -> "InstalledComponents":
        paths = ctx.paths
        version = apt_installed_version(ctx, "kicad")
        config_dir = kicad_config_dir(paths.kicad_config_root, version) if version else None
        sources: Tuple[Path, ...] = ()
        if paths.apt_sources_dir.is_dir():
            sources = tuple(sorted(paths.apt_sources_dir.glob("kicad*")))
        return cls(
            config_dir=paths.config_dir.is_dir(),
            venv=paths.venv_dir.is_dir(),
            launcher=paths.launcher.exists(),
            system_desktop_entry=paths.system_desktop_entry.exists(),
            user_desktop_entry=paths.user_desktop_entry.exists(),
            kicad_version=version,
            kicad_config_dir=config_dir if config_dir is not None and config_dir.is_dir() else None,
            kicad_share_dir=paths.kicad_share_dir.is_dir(),
            kicad_apt_sources=sources,
            pdk=paths.pdk_dir.is_dir(),
            nghdl_dir=ctx.bundled(ctx.bundle.nghdl_dir).is_dir(),
            model_param_dirs=tuple(
                p for p in (ctx.bundled(rel) for rel in ctx.bundle.model_param_dirs) if p.is_dir()
            ),
        )

    @property
    def anything(self) -> bool:
        return any(
            [
                self.config_dir,
                self.launcher,
                self.system_desktop_entry,
                self.user_desktop_entry,
                self.kicad_version,
                self.kicad_share_dir,
                self.pdk,
                self.nghdl_dir,
            ]
        )


def report_gap(ctx: RunContext, what: str) -> None:
    logger.info("%s not found. It may have been already removed.", what)
    ctx.report.gaps.append(what)


class RemoveLaunchersStep:
    step_id = "uninstall_launchers"
    policy = FailurePolicy.BEST_EFFORT

    def __init__(self, snapshot: InstalledComponents) -> None:
        self.snapshot = snapshot

    def run(self, ctx: RunContext) -> None:
        logger.info("Removing eSim launchers...")
        paths = ctx.paths
        for present, target, privileged in [
            (self.snapshot.user_desktop_entry, paths.user_desktop_entry, False),
            (self.snapshot.launcher, paths.launcher, True),
            (self.snapshot.system_desktop_entry, paths.system_desktop_entry, True),
        ]:
            if present:
                ctx.run(["rm", "-f", target], privileged=privileged)
            else:
                report_gap(ctx, str(target))


class RemoveNghdlStep:
    step_id = "uninstall_nghdl"
    policy = FailurePolicy.BEST_EFFORT

    def __init__(self, snapshot: InstalledComponents) -> None:
        self.snapshot = snapshot

    def run(self, ctx: RunContext) -> None:
        logger.info("Removing NGHDL...")
        for d in self.snapshot.model_param_dirs:
            for child in sorted(d.iterdir()):
                ctx.run(["rm", "-rf", child])

        if not self.snapshot.nghdl_dir:
            report_gap(ctx, "NGHDL directory")
            return

        nghdl_dir = ctx.bundled(ctx.bundle.nghdl_dir)
        script = nghdl_dir / ctx.bundle.nghdl_script
        if script.is_file():
            with tolerated(ctx, "NGHDL uninstaller"):
                ctx.run(["chmod", "+x", script])
                ctx.run([f"./{script.name}", "--uninstall"], check=False, cwd=nghdl_dir)
        else:
            report_gap(ctx, str(script))

        try:
            ctx.run(["rm", "-rf", nghdl_dir])
        except Exception:
            logger.error('Error while removing some files/directories in "%s". Please remove it manually', nghdl_dir)
            raise


class RemovePdkStep:
    step_id = "uninstall_sky130_pdk"
    policy = FailurePolicy.BEST_EFFORT

    def __init__(self, snapshot: InstalledComponents) -> None:
        self.snapshot = snapshot

    def run(self, ctx: RunContext) -> None:
        logger.info("Removing SKY130 PDK...")
        if self.snapshot.pdk:
            ctx.run(["rm", "-rf", ctx.paths.pdk_dir], privileged=True)
        else:
            report_gap(ctx, str(ctx.paths.pdk_dir))


class RemoveKicadStep:
    step_id = "uninstall_kicad"
    policy = FailurePolicy.BEST_EFFORT

    def __init__(self, snapshot: InstalledComponents) -> None:
        self.snapshot = snapshot

    def run(self, ctx: RunContext) -> None:
        logger.info("Removing KiCad...")
        snap = self.snapshot
        if snap.kicad_version:
            apt_purge(ctx, package_list(ctx.manifest, "kicad", "packages"))
        else:
            report_gap(ctx, "KiCad package")

        if snap.kicad_share_dir:
            ctx.run(["rm", "-rf", ctx.paths.kicad_share_dir], privileged=True)
        else:
            report_gap(ctx, str(ctx.paths.kicad_share_dir))

        if snap.kicad_apt_sources:
            ctx.run(["rm", "-f", *snap.kicad_apt_sources], privileged=True)

        # Version sampled before the purge above, so this is the directory
        # of the KiCad that was actually installed.
        if snap.kicad_config_dir is not None:
            ctx.run(["rm", "-rf", snap.kicad_config_dir])
        else:
            report_gap(ctx, "KiCad configuration directory")


class RemoveVenvStep:
    step_id = "uninstall_venv"
    policy = FailurePolicy.BEST_EFFORT

    def __init__(self, snapshot: InstalledComponents) -> None:
        self.snapshot = snapshot

    def run(self, ctx: RunContext) -> None:
        logger.info("Removing virtual env...")
        if self.snapshot.venv:
            ctx.run(["rm", "-rf", ctx.paths.venv_dir], privileged=True)
        else:
            report_gap(ctx, str(ctx.paths.venv_dir))


class RemoveConfigStep:
    step_id = "uninstall_config"
    policy = FailurePolicy.BEST_EFFORT

    def __init__(self, snapshot: InstalledComponents) -> None:
        self.snapshot = snapshot

    def run(self, ctx: RunContext) -> None:
        logger.info("Removing eSim configuration...")
        if self.snapshot.config_dir:
            ctx.run(["rm", "-rf", ctx.paths.config_dir], privileged=True)
        else:
            report_gap(ctx, str(ctx.paths.config_dir))


def build_uninstall_steps(snapshot: InstalledComponents) -> List[Step]:
    return [
        RemoveLaunchersStep(snapshot),
        RemoveNghdlStep(snapshot),
        RemovePdkStep(snapshot),
        RemoveKicadStep(snapshot),
        RemoveVenvStep(snapshot),
        RemoveConfigStep(snapshot),
    ]


def run_uninstall(ctx: RunContext, prompter: Prompter) -> Optional[PipelineResult]:
    """Confirm, snapshot, then reverse every component.

    Returns None when the operator declines.
    """

    if not ask_yes_no(prompter, CONFIRM_QUESTION):
        logger.info("Uninstall cancelled; nothing was removed")
        return None

    snapshot = InstalledComponents.detect(ctx)
    if not snapshot.anything:
        logger.info("No eSim installation found; removing whatever remains")

    result = run_pipeline(ctx=ctx, steps=build_uninstall_steps(snapshot))
    if result.failed_steps:
        logger.warning("Some components could not be removed: %s", ", ".join(result.failed_steps))
    logger.info("----------------eSim Uninstalled Successfully----------------")
    return result


def summarize(items: Sequence[str]) -> str:
    return ", ".join(items) if items else "none"
