from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    """Every fixed location the installer reads or writes.

    Per-user locations derive from ``home``; system locations are absolute
    defaults that tests point at a scratch tree.
    """

    home: Path = field(default_factory=Path.home)
    launcher: Path = Path("/usr/bin/esim")
    applications_dir: Path = Path("/usr/share/applications")
    kicad_share_dir: Path = Path("/usr/share/kicad")
    kicad_symbols_dir: Path = Path("/usr/share/kicad/symbols")
    apt_sources_dir: Path = Path("/etc/apt/sources.list.d")
    pdk_parent: Path = Path("/usr/share/local")
    pdk_name: str = "sky130_fd_pr"
    config_file_name: str = "config.ini"
    desktop_file_name: str = "esim.desktop"

    @property
    def config_dir(self) -> Path:
        return self.home / ".esim"

    @property
    def config_file(self) -> Path:
        return self.config_dir / self.config_file_name

    @property
    def venv_dir(self) -> Path:
        return self.config_dir / "env"

    @property
    def user_desktop_dir(self) -> Path:
        return self.home / "Desktop"

    @property
    def user_desktop_entry(self) -> Path:
        return self.user_desktop_dir / self.desktop_file_name

    @property
    def system_desktop_entry(self) -> Path:
        return self.applications_dir / self.desktop_file_name

    @property
    def kicad_config_root(self) -> Path:
        return self.home / ".config" / "kicad"

    @property
    def pdk_dir(self) -> Path:
        return self.pdk_parent / self.pdk_name

    @property
    def log_file(self) -> Path:
        # Outside ~/.esim so the uninstall log survives removal of that dir.
        return self.home / ".local" / "state" / "esim" / "installer.log"


@dataclass(frozen=True)
class Bundle:
    """Artifacts shipped inside the eSim source tree, relative to its root."""

    kicad_library: str = "library/kicadLibrary.tar.xz"
    kicad_library_dir: str = "kicadLibrary"
    nghdl_zip: str = "nghdl.zip"
    nghdl_dir: str = "nghdl"
    nghdl_script: str = "install-nghdl.sh"
    sky130_archive: str = "library/sky130_fd_pr.tar.xz"
    logo: str = "images/logo.png"
    frontend_dir: str = "src/frontEnd"
    model_param_dirs: tuple[str, ...] = ("library/modelParamXML/Nghdl", "library/modelParamXML/Ngveri")


PATHS = Paths()
BUNDLE = Bundle()
