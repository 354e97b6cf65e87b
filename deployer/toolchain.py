"""
Deployment Toolchain
Wires artifacts, network connection, wallet and gas settings into contract factories
"""

from typing import Dict, Optional
from loguru import logger

from blockchain.artifacts import ArtifactStore
from blockchain.contract_factory import ContractFactory
from blockchain.nonce_manager import NonceManager
from blockchain.transaction_builder import TransactionBuilder
from utils.gas_calculator import GasCalculator
from utils.rpc_manager import RPCManager
from .config import DeployConfig
from .wallet_manager import WalletManager


class Toolchain:
    """
    Entry point for deployments: get_contract_factory(name)
    """

    def __init__(
        self,
        config: DeployConfig,
        rpc_manager: Optional[RPCManager] = None,
        artifact_store: Optional[ArtifactStore] = None
    ):
        """
        Initialize Toolchain

        Args:
            config: Deployment settings
            rpc_manager: Connection manager (built from config when None)
            artifact_store: Artifact lookup (built from config when None)
        """
        self.config = config
        self.rpc_manager = rpc_manager or RPCManager(
            config.rpc_urls,
            chain_id=config.chain_id,
            poa=config.poa,
            network_name=config.network_name
        )
        self.artifact_store = artifact_store or ArtifactStore(config.artifacts_dir)

        self.wallet: Optional[WalletManager] = None

    async def get_signer(self) -> WalletManager:
        """Deployer wallet, created on first use"""
        if self.wallet is None:
            w3 = await self.rpc_manager.get_web3()
            self.wallet = await WalletManager.create(w3, self.config.private_key)
        return self.wallet

    async def get_contract_factory(
        self,
        name: str,
        libraries: Optional[Dict[str, str]] = None
    ) -> ContractFactory:
        """
        Contract factory for a compiled contract

        Args:
            name: Contract name or fully qualified name
            libraries: Library addresses for linking (default: from config)

        Returns:
            ContractFactory
        """
        # Resolved before touching the network
        artifact = self.artifact_store.get_artifact(name)
        artifact.ensure_deployable()

        w3 = await self.rpc_manager.get_web3()
        signer = await self.get_signer()

        gas_calculator = GasCalculator(
            w3,
            gas_multiplier=self.config.gas_multiplier,
            gas_limit=self.config.gas_limit,
            max_gas_price_gwei=self.config.max_gas_price_gwei,
            priority_fee_gwei=self.config.priority_fee_gwei
        )
        transaction_builder = TransactionBuilder(
            w3,
            gas_calculator,
            NonceManager(w3, signer.address),
            self.rpc_manager.chain_id
        )

        logger.debug(f"Contract factory ready for {artifact.fully_qualified_name}")

        return ContractFactory(
            w3,
            artifact,
            signer,
            transaction_builder,
            libraries=libraries if libraries is not None else self.config.libraries,
            timeout=self.config.timeout_seconds,
            poll_latency=self.config.poll_latency,
            confirmations=self.config.confirmations
        )
