"""
Contract Factory
Deploys a compiled contract and waits for it to be mined
"""

import time
import asyncio
from typing import Dict, Optional
from web3 import AsyncWeb3
from web3.exceptions import TimeExhausted
from loguru import logger

from .artifacts import ContractArtifact, link_bytecode
from .exceptions import (
    DeploymentError,
    DeploymentTimeoutError,
    TransactionRevertedError
)


class ContractDeployment:
    """
    Handle to a submitted deployment transaction
    address stays None until deployed() has confirmed it
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        contract_name: str,
        tx_hash: str,
        sender: str,
        nonce: int,
        timeout: float = 120,
        poll_latency: float = 0.1,
        confirmations: int = 1
    ):
        self.w3 = w3
        self.contract_name = contract_name
        self.tx_hash = tx_hash
        self.sender = sender
        self.nonce = nonce
        self.timeout = timeout
        self.poll_latency = poll_latency
        self.confirmations = confirmations

        self.receipt = None
        self.address: Optional[str] = None

    async def deployed(self) -> 'ContractDeployment':
        """
        Wait until the deployment transaction is mined

        Returns:
            self, with address and receipt populated
        """
        if self.address:
            return self

        logger.info(f"Waiting for confirmation of {self.tx_hash}...")
        started = time.monotonic()

        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=self.timeout,
                poll_latency=self.poll_latency
            )
        except TimeExhausted as e:
            raise DeploymentTimeoutError(self.tx_hash, self.timeout) from e

        if receipt['status'] != 1:
            raise TransactionRevertedError(self.tx_hash, receipt)

        contract_address = receipt.get('contractAddress')
        if not contract_address:
            raise DeploymentError(
                f"Transaction {self.tx_hash} was mined but created no contract"
            )

        if self.confirmations > 1:
            remaining = self.timeout - (time.monotonic() - started)
            await self._wait_for_confirmations(receipt['blockNumber'], remaining)

        self.receipt = receipt
        self.address = AsyncWeb3.to_checksum_address(contract_address)

        logger.info(
            f"{self.contract_name} mined in block {receipt['blockNumber']}, "
            f"gas used {receipt['gasUsed']}"
        )
        return self

    async def _wait_for_confirmations(self, block_number: int, timeout: float):
        target_block = block_number + self.confirmations - 1
        deadline = time.monotonic() + timeout

        while True:
            current_block = await self.w3.eth.block_number
            if current_block >= target_block:
                return

            if time.monotonic() >= deadline:
                raise DeploymentTimeoutError(
                    self.tx_hash,
                    self.timeout,
                    f"Deployment transaction {self.tx_hash} mined in block {block_number} "
                    f"but only reached {current_block - block_number + 1}/"
                    f"{self.confirmations} confirmations after {self.timeout}s"
                )

            logger.debug(f"Block {current_block}, waiting for {target_block}")
            await asyncio.sleep(self.poll_latency)


class ContractFactory:
    """
    Produces deployments of one compiled contract
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        artifact: ContractArtifact,
        signer,
        transaction_builder,
        libraries: Optional[Dict[str, str]] = None,
        timeout: float = 120,
        poll_latency: float = 0.1,
        confirmations: int = 1
    ):
        """
        Initialize Contract Factory

        Args:
            w3: AsyncWeb3 instance
            artifact: Compiled contract
            signer: WalletManager that pays for and sends the deployment
            transaction_builder: TransactionBuilder for the signer's account
            libraries: Library name -> address for unlinked bytecode
            timeout: Seconds to wait for the receipt
            poll_latency: Seconds between receipt polls
            confirmations: Blocks that must include the transaction
        """
        artifact.ensure_deployable()

        self.w3 = w3
        self.artifact = artifact
        self.signer = signer
        self.transaction_builder = transaction_builder
        self.timeout = timeout
        self.poll_latency = poll_latency
        self.confirmations = confirmations

        if artifact.needs_linking or libraries:
            self.bytecode = link_bytecode(artifact, libraries)
        else:
            self.bytecode = artifact.bytecode

        self.contract_class = w3.eth.contract(abi=artifact.abi, bytecode=self.bytecode)

    @property
    def contract_name(self) -> str:
        return self.artifact.contract_name

    async def deploy(self, *constructor_args, value: int = 0) -> ContractDeployment:
        """
        Submit the deployment transaction

        Args:
            constructor_args: Constructor arguments
            value: Wei sent to a payable constructor

        Returns:
            ContractDeployment (not yet confirmed)
        """
        logger.info(f"Deploying {self.contract_name} from {self.signer.address}...")

        transaction = await self.transaction_builder.build_deployment_tx(
            self.contract_class,
            constructor_args,
            sender=self.signer.address,
            value=value
        )

        required_wei = self.transaction_builder.gas_calculator.deployment_cost(
            transaction['gas'],
            transaction
        ) + value
        await self.signer.ensure_funds(required_wei)

        tx_hash = await self.signer.send_transaction(transaction)
        tx_hash_hex = AsyncWeb3.to_hex(tx_hash)

        logger.info(f"Transaction sent: {tx_hash_hex}")

        return ContractDeployment(
            self.w3,
            self.contract_name,
            tx_hash_hex,
            sender=self.signer.address,
            nonce=transaction['nonce'],
            timeout=self.timeout,
            poll_latency=self.poll_latency,
            confirmations=self.confirmations
        )
