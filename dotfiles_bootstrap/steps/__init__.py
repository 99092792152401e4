from .step_10_detect_platform import DetectPlatformStep
from .step_15_bootstrap_package_manager import BootstrapPackageManagerStep
from .step_20_install_hosting_cli import InstallHostingCliStep
from .step_30_install_dotfiles_manager import InstallDotfilesManagerStep
from .step_40_authenticate import AuthenticateStep
from .step_50_sync_dotfiles import SyncDotfilesStep

__all__ = [
    "DetectPlatformStep",
    "BootstrapPackageManagerStep",
    "InstallHostingCliStep",
    "InstallDotfilesManagerStep",
    "AuthenticateStep",
    "SyncDotfilesStep",
]
