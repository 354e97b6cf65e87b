"""
Utilities Package
Network connection, gas pricing, and logging setup
"""

from .gas_calculator import GasCalculator
from .rpc_manager import RPCManager
from .logger import configure_logging, log_result

__all__ = [
    'GasCalculator',
    'RPCManager',
    'configure_logging',
    'log_result'
]
