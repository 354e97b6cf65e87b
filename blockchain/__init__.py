"""
Blockchain Interaction Package
Handles artifact lookup, deployment transactions, and nonce management
"""

from .artifacts import ArtifactStore, ContractArtifact, link_bytecode
from .contract_factory import ContractFactory, ContractDeployment
from .transaction_builder import TransactionBuilder
from .nonce_manager import NonceManager

__all__ = [
    'ArtifactStore',
    'ContractArtifact',
    'link_bytecode',
    'ContractFactory',
    'ContractDeployment',
    'TransactionBuilder',
    'NonceManager'
]
