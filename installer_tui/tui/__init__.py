from .app import InstallerApp

__all__ = ["InstallerApp"]
