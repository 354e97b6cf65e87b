"""
Nonce Manager
Hands out sequential nonces for the deployer account
"""

import asyncio
from typing import Optional
from web3 import AsyncWeb3
from loguru import logger


class NonceManager:
    """
    Tracks the next nonce for one account
    Syncs lazily from the node's pending transaction count
    """

    def __init__(self, w3: AsyncWeb3, address: str):
        """
        Initialize Nonce Manager

        Args:
            w3: AsyncWeb3 instance
            address: Account that sends the transactions
        """
        self.w3 = w3
        self.address = AsyncWeb3.to_checksum_address(address)

        self.current_nonce: Optional[int] = None
        self.lock = asyncio.Lock()

    async def _sync_nonce(self):
        """Sync nonce with blockchain"""
        # Include pending transactions so a queued tx is not replaced
        self.current_nonce = await self.w3.eth.get_transaction_count(self.address, 'pending')
        logger.debug(f"Nonce synced for {self.address}: {self.current_nonce}")

    async def get_nonce(self) -> int:
        """
        Get next available nonce

        Returns:
            Next nonce to use
        """
        async with self.lock:
            if self.current_nonce is None:
                await self._sync_nonce()

            nonce = self.current_nonce
            self.current_nonce += 1

            logger.debug(f"Allocated nonce: {nonce}")
            return nonce

