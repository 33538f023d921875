"""
Tests for the uninstall path and the installed-components snapshot.
"""

import pytest

from conftest import FakeRunner, ScriptedPrompter
from esim_installer.errors import UsageError
from esim_installer.uninstall import InstalledComponents, run_uninstall


def _fake_install(ctx):
    """Lay down the artifacts a completed install leaves behind."""
    p = ctx.paths
    p.venv_dir.joinpath("bin").mkdir(parents=True)
    p.config_file.write_text("[eSim]\n")
    p.launcher.parent.mkdir(parents=True)
    p.launcher.write_text("#!/bin/bash\n")
    p.applications_dir.mkdir(parents=True)
    p.system_desktop_entry.write_text("[Desktop Entry]\n")
    p.user_desktop_dir.mkdir()
    p.user_desktop_entry.write_text("[Desktop Entry]\n")
    (p.kicad_config_root / "8.0").mkdir(parents=True)
    (p.kicad_config_root / "8.0/sym-lib-table").write_text("()\n")
    p.kicad_symbols_dir.mkdir(parents=True)
    p.apt_sources_dir.mkdir(parents=True)
    (p.apt_sources_dir / "kicad-ubuntu-kicad-8.0-releases-noble.list").write_text("deb x\n")
    (p.pdk_dir / "models").mkdir(parents=True)
    nghdl = ctx.install_root / "nghdl"
    nghdl.mkdir()
    (nghdl / "install-nghdl.sh").write_text("#!/bin/bash\n")
    for rel in ctx.bundle.model_param_dirs:
        d = ctx.install_root / rel
        d.mkdir(parents=True)
        (d / "counter").mkdir()


class TestSnapshot:
    def test_fresh_machine(self, make_ctx):
        ctx = make_ctx(runner=FakeRunner(kicad_installed=False))
        snap = InstalledComponents.detect(ctx)
        assert snap.anything is False
        assert snap.kicad_version is None
        assert snap.kicad_config_dir is None
        assert snap.kicad_apt_sources == ()

    def test_installed_machine(self, ctx):
        _fake_install(ctx)
        snap = InstalledComponents.detect(ctx)
        assert snap.config_dir and snap.venv and snap.launcher and snap.pdk and snap.nghdl_dir
        assert snap.kicad_version == "8.0"
        assert snap.kicad_config_dir == ctx.paths.kicad_config_root / "8.0"
        assert len(snap.kicad_apt_sources) == 1
        assert len(snap.model_param_dirs) == 2


class TestRunUninstall:
    @pytest.mark.parametrize("answer", ["n", "N"])
    def test_decline_removes_nothing(self, ctx, runner, answer):
        _fake_install(ctx)
        assert run_uninstall(ctx, ScriptedPrompter([answer])) is None
        assert ctx.paths.config_dir.is_dir()
        assert ctx.paths.launcher.is_file()
        assert ctx.paths.pdk_dir.is_dir()
        assert runner.calls == []

    def test_unrecognized_answer_removes_nothing(self, ctx, runner):
        _fake_install(ctx)
        with pytest.raises(UsageError):
            run_uninstall(ctx, ScriptedPrompter(["yes please"]))
        assert ctx.paths.config_dir.is_dir()
        assert runner.calls == []

    def test_fresh_machine_reports_gaps(self, make_ctx):
        ctx = make_ctx(runner=FakeRunner(kicad_installed=False))
        result = run_uninstall(ctx, ScriptedPrompter(["y"]))
        assert result is not None
        assert result.failed_steps == []
        assert "NGHDL directory" in ctx.report.gaps
        assert "KiCad package" in ctx.report.gaps
        assert str(ctx.paths.venv_dir) in ctx.report.gaps
        assert str(ctx.paths.config_dir) in ctx.report.gaps

    def test_removes_everything(self, ctx, runner):
        _fake_install(ctx)
        result = run_uninstall(ctx, ScriptedPrompter(["Y"]))
        p = ctx.paths
        assert result.failed_steps == []
        for gone in [
            p.config_dir,
            p.launcher,
            p.system_desktop_entry,
            p.user_desktop_entry,
            p.kicad_share_dir,
            p.kicad_config_root / "8.0",
            p.pdk_dir,
            ctx.install_root / "nghdl",
        ]:
            assert not gone.exists(), gone
        assert list(p.apt_sources_dir.iterdir()) == []
        for rel in ctx.bundle.model_param_dirs:
            assert list((ctx.install_root / rel).iterdir()) == []
        assert ["./install-nghdl.sh", "--uninstall"] in runner.calls
        assert any(c[:2] == ["apt", "purge"] for c in runner.calls)

    def test_config_dir_detected_before_purge(self, ctx, runner):
        _fake_install(ctx)
        run_uninstall(ctx, ScriptedPrompter(["y"]))
        # The purge flips the package to not-installed; the 8.0 directory
        # must still have been targeted rather than the 6.0 fallback.
        assert runner.kicad_installed is False
        assert not (ctx.paths.kicad_config_root / "8.0").exists()

    def test_nghdl_uninstaller_failure_does_not_stop_removal(self, make_ctx):
        runner = FakeRunner(fail=("install-nghdl.sh",))
        ctx = make_ctx(runner=runner)
        _fake_install(ctx)
        result = run_uninstall(ctx, ScriptedPrompter(["y"]))
        assert result.failed_steps == []
        assert not (ctx.install_root / "nghdl").exists()
        assert not ctx.paths.config_dir.exists()
