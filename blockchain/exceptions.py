"""
Deployment Exceptions
Error types raised while resolving artifacts and deploying contracts
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for every deployment failure"""


class ArtifactNotFoundError(DeploymentError):
    """No compiled artifact matches the requested contract name"""

    def __init__(self, contract_name: str, artifacts_dir: str):
        self.contract_name = contract_name
        self.artifacts_dir = artifacts_dir
        super().__init__(
            f"Artifact for contract '{contract_name}' not found in {artifacts_dir}. "
            f"Run 'npx hardhat compile' first"
        )


class AmbiguousArtifactError(DeploymentError):
    """Several artifacts share the requested contract name"""

    def __init__(self, contract_name: str, candidates: list):
        self.contract_name = contract_name
        self.candidates = candidates
        super().__init__(
            f"Multiple artifacts for contract '{contract_name}', "
            f"use a fully qualified name instead: {', '.join(candidates)}"
        )


class InvalidArtifactError(DeploymentError):
    """Artifact file is unreadable or cannot be deployed"""


class MissingLibraryError(DeploymentError):
    """Bytecode link references do not match the supplied libraries"""


class NetworkConnectionError(DeploymentError):
    """None of the configured RPC endpoints answered"""


class ChainIdMismatchError(DeploymentError):
    """Connected node reports a different chain id than configured"""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected chain id {expected}, node reports {actual}")


class InsufficientFundsError(DeploymentError):
    """Deployer balance cannot cover the deployment cost"""

    def __init__(self, address: str, balance_wei: int, required_wei: int):
        self.address = address
        self.balance_wei = balance_wei
        self.required_wei = required_wei
        super().__init__(
            f"Insufficient balance on {address}: "
            f"have {balance_wei} wei, need {required_wei} wei"
        )


class DeploymentTimeoutError(DeploymentError):
    """Deployment transaction was not confirmed in time"""

    def __init__(self, tx_hash: str, timeout: float, message: Optional[str] = None):
        self.tx_hash = tx_hash
        self.timeout = timeout
        super().__init__(
            message or
            f"Deployment transaction {tx_hash} not confirmed after {timeout}s; "
            f"it may still be mined later"
        )


class TransactionRevertedError(DeploymentError):
    """Deployment transaction was mined with a failed status"""

    def __init__(self, tx_hash: str, receipt=None):
        self.tx_hash = tx_hash
        self.receipt = receipt
        block = receipt.get('blockNumber') if receipt else None
        super().__init__(f"Deployment transaction {tx_hash} reverted (block {block})")
