"""Package installation pipeline."""

from ..paths import InstallationPaths
from .interface import DefaultInstaller, Installer
from .pipeline import SHADOW_PACKAGE_NAME, install_package, load_installed_package, uninstall_package

__all__ = [
    "DefaultInstaller",
    "InstallationPaths",
    "Installer",
    "SHADOW_PACKAGE_NAME",
    "install_package",
    "load_installed_package",
    "uninstall_package",
]
