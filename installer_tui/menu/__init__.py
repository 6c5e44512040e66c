from .controller import Transition, WizardController
from .models import FilesystemType, InstallerConfig, InstallerSettings, NetworkingMode, RaidLevel, StepResult
from .steps import StepRegistry, create_registry

__all__ = [
    "FilesystemType",
    "InstallerConfig",
    "InstallerSettings",
    "NetworkingMode",
    "RaidLevel",
    "StepRegistry",
    "StepResult",
    "Transition",
    "WizardController",
    "create_registry",
]
