"""
Wallet Manager
The account that pays for and sends the deployment
"""

from typing import Dict, Optional
from web3 import AsyncWeb3
from eth_account import Account
from loguru import logger

from blockchain.exceptions import InsufficientFundsError
from .config import ConfigurationError


class WalletManager:
    """
    Deployer account, in one of two modes:
    - Local key: transactions are signed here and sent raw
    - Node account: the node's first unlocked account signs (Hardhat / Anvil)
    """

    def __init__(self, w3: AsyncWeb3, address: str, account=None):
        """
        Initialize wallet manager

        Args:
            w3: AsyncWeb3 instance
            address: Deployer address
            account: eth_account LocalAccount, None for a node-managed account
        """
        self.w3 = w3
        self.address = AsyncWeb3.to_checksum_address(address)
        self.account = account

    @classmethod
    async def create(cls, w3: AsyncWeb3, private_key: Optional[str] = None) -> 'WalletManager':
        """
        Build the wallet from a private key or the node's accounts

        Args:
            w3: AsyncWeb3 instance
            private_key: Hex private key (None = use the node's first account)

        Returns:
            WalletManager
        """
        if private_key:
            try:
                account = Account.from_key(private_key)
            except ValueError as e:
                raise ConfigurationError("DEPLOYER_PRIVATE_KEY is not a valid private key") from e

            logger.info(f"Deployer wallet: {account.address}")
            return cls(w3, account.address, account)

        accounts = await w3.eth.accounts
        if not accounts:
            raise ConfigurationError(
                "DEPLOYER_PRIVATE_KEY not set and the node manages no accounts"
            )

        logger.info(f"Deployer wallet (node account): {accounts[0]}")
        return cls(w3, accounts[0])

    @property
    def is_local(self) -> bool:
        return self.account is not None

    async def get_balance(self) -> int:
        """Native balance in wei"""
        return await self.w3.eth.get_balance(self.address)

    async def ensure_funds(self, required_wei: int):
        """
        Raise if the balance cannot cover a transaction

        Args:
            required_wei: Worst-case cost in wei
        """
        balance = await self.get_balance()

        logger.info(
            f"Account balance: {AsyncWeb3.from_wei(balance, 'ether')} ETH, "
            f"max deployment cost: {AsyncWeb3.from_wei(required_wei, 'ether')} ETH"
        )

        if balance < required_wei:
            raise InsufficientFundsError(self.address, balance, required_wei)

    async def send_transaction(self, transaction: Dict) -> bytes:
        """
        Sign (when local) and broadcast a transaction

        Args:
            transaction: Fully populated transaction dict

        Returns:
            Transaction hash
        """
        if self.is_local:
            signed_tx = self.account.sign_transaction(transaction)
            return await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        return await self.w3.eth.send_transaction(transaction)
