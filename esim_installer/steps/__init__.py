from .step_10_configure_proxy import ConfigureProxyStep
from .step_20_write_config import WriteConfigStep
from .step_30_install_dependencies import InstallDependenciesStep
from .step_40_install_kicad import InstallKicadStep
from .step_45_copy_kicad_library import CopyKicadLibraryStep
from .step_50_install_nghdl import InstallNghdlStep
from .step_60_install_sky130_pdk import InstallSky130PdkStep
from .step_70_desktop_integration import DesktopIntegrationStep

__all__ = [
    "ConfigureProxyStep",
    "WriteConfigStep",
    "InstallDependenciesStep",
    "InstallKicadStep",
    "CopyKicadLibraryStep",
    "InstallNghdlStep",
    "InstallSky130PdkStep",
    "DesktopIntegrationStep",
]
