"""
Deployer Package
Configuration, deploying wallet, toolchain and the deployment runner
"""

from .config import DeployConfig, ConfigurationError
from .wallet_manager import WalletManager
from .toolchain import Toolchain
from .deployment_recorder import DeploymentRecorder
from .runner import DeploymentRunner

__all__ = [
    'DeployConfig',
    'ConfigurationError',
    'WalletManager',
    'Toolchain',
    'DeploymentRecorder',
    'DeploymentRunner'
]
