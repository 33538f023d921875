"""
Shared test fixtures and configuration.
"""

import io
import os
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from esim_installer.context import RunContext
from esim_installer.errors import CommandError
from esim_installer.lib.command import CmdResult, run_cmd
from esim_installer.lib.env import Paths
from esim_installer.lib.manifests import load_manifest

INSTALLED_POLICY = "kicad:\n  Installed: 8.0.4+dfsg-1\n  Candidate: 8.0.4+dfsg-1\n"
NOT_INSTALLED_POLICY = "kicad:\n  Installed: (none)\n  Candidate: 8.0.4+dfsg-1\n"


class ScriptedPrompter:
    """Answers prompts from fixed lists and remembers the questions."""

    def __init__(self, answers: List[str], secrets: Optional[List[str]] = None):
        self.answers = list(answers)
        self.secrets = list(secrets or [])
        self.questions: List[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.answers.pop(0)

    def ask_secret(self, question: str) -> str:
        self.questions.append(question)
        return self.secrets.pop(0)


class FakeRunner:
    """Stands in for apt, virtualenv, pip, python3, gio and the NGHDL script.

    Everything else (cp, mv, rm, mkdir, chown, chmod) really runs, against
    the temporary tree the tests set up.
    """

    FAKED = {
        "apt-get",
        "apt",
        "apt-cache",
        "virtualenv",
        "pip",
        "python3",
        "gio",
        "install-nghdl.sh",
        "sudo",
    }

    def __init__(self, *, kicad_installed: bool = True, probe_rc: int = 0, fail: tuple = ()):
        self.kicad_installed = kicad_installed
        self.probe_rc = probe_rc
        self.fail = tuple(fail)
        self.calls: List[List[str]] = []
        self.envs: List[dict] = []

    def faked(self, name: str) -> List[List[str]]:
        return [c for c in self.calls if Path(c[0]).name == name]

    def __call__(self, argv, *, check=True, env=None, cwd=None, input_text=None) -> CmdResult:
        argv = [str(a) for a in argv]
        name = Path(argv[0]).name
        if name not in self.FAKED:
            return run_cmd(argv, check=check, env=env, cwd=cwd, input_text=input_text)

        self.calls.append(argv)
        self.envs.append(dict(env or {}))
        key = " ".join([name, *argv[1:]])
        rc, stdout = 0, ""

        if name == "apt-cache":
            stdout = INSTALLED_POLICY if self.kicad_installed else NOT_INSTALLED_POLICY
        elif name == "apt" and argv[1:2] == ["purge"]:
            self.kicad_installed = False
        elif name == "virtualenv":
            bin_dir = Path(argv[-1]) / "bin"
            bin_dir.mkdir(parents=True, exist_ok=True)
            (bin_dir / "activate").write_text("# activate\n")
        elif name == "python3" and "--version" in argv:
            stdout = "Python 3.12.3\n"
        elif name == "python3" and "-c" in argv:
            rc = self.probe_rc

        if any(key.startswith(prefix) for prefix in self.fail):
            rc = 1

        if check and rc != 0:
            raise CommandError(argv, rc, "simulated failure")
        return CmdResult(argv=argv, returncode=rc, stdout=stdout, stderr="")


@pytest.fixture(autouse=True)
def _no_global_logging(monkeypatch):
    """Keep run() from attaching handlers to the root logger."""
    monkeypatch.setattr("esim_installer.main.configure_logging", lambda **kw: kw.get("log_path"))


@pytest.fixture
def paths(tmp_path: Path) -> Paths:
    sysroot = tmp_path / "sys"
    home = tmp_path / "home"
    home.mkdir()
    return Paths(
        home=home,
        launcher=sysroot / "usr/bin/esim",
        applications_dir=sysroot / "usr/share/applications",
        kicad_share_dir=sysroot / "usr/share/kicad",
        kicad_symbols_dir=sysroot / "usr/share/kicad/symbols",
        apt_sources_dir=sysroot / "etc/apt/sources.list.d",
        pdk_parent=sysroot / "usr/share/local",
    )


def _tar_xz(archive: Path, members: dict) -> None:
    archive.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive, "w:xz") as tf:
        for name, text in members.items():
            data = text.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tf.addfile(info, io.BytesIO(data))


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    """An eSim source tree with all four bundled archives present."""
    root = tmp_path / "eSim-2.4"
    (root / "src/frontEnd").mkdir(parents=True)
    (root / "src/frontEnd/Application.py").write_text("print('eSim')\n")
    (root / "images").mkdir()
    (root / "images/logo.png").write_bytes(b"\x89PNG\r\n")
    (root / "LICENSE").write_text("GPL\n")

    _tar_xz(
        root / "library/kicadLibrary.tar.xz",
        {
            "kicadLibrary/template/sym-lib-table": "(sym_lib_table)\n",
            "kicadLibrary/eSim-symbols/eSim_Analog.kicad_sym": "(kicad_symbol_lib)\n",
            "kicadLibrary/eSim-symbols/eSim_Digital.kicad_sym": "(kicad_symbol_lib)\n",
        },
    )
    _tar_xz(
        root / "library/sky130_fd_pr.tar.xz",
        {"sky130_fd_pr/models/all.spice": "* sky130\n"},
    )
    with zipfile.ZipFile(root / "nghdl.zip", "w") as zf:
        zf.writestr("nghdl/install-nghdl.sh", "#!/bin/bash\nexit 0\n")
        zf.writestr("nghdl/README.md", "NGHDL\n")
    return root


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_ctx(paths: Paths, install_root: Path, runner: FakeRunner) -> Callable[..., RunContext]:
    def _make(**overrides) -> RunContext:
        kwargs = dict(
            install_root=install_root,
            paths=paths,
            manifest=load_manifest(),
            env=dict(os.environ),
            runner=runner,
            use_sudo=False,
        )
        kwargs.update(overrides)
        return RunContext(**kwargs)

    return _make


@pytest.fixture
def ctx(make_ctx) -> RunContext:
    return make_ctx()
