"""
Gas Calculator
Gas limit estimation and fee selection for deployment transactions
"""

from typing import Dict, Optional
from web3 import AsyncWeb3
from loguru import logger


class GasCalculator:
    """
    Picks gas limit and fee parameters for a transaction
    Uses EIP-1559 fees when the chain reports a base fee, legacy gasPrice otherwise
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        gas_multiplier: float = 1.2,
        gas_limit: Optional[int] = None,
        max_gas_price_gwei: Optional[float] = None,
        priority_fee_gwei: Optional[float] = None
    ):
        """
        Initialize Gas Calculator

        Args:
            w3: AsyncWeb3 instance
            gas_multiplier: Buffer applied to the node's gas estimate
            gas_limit: Fixed gas limit, skips estimation when set
            max_gas_price_gwei: Cap for maxFeePerGas / gasPrice
            priority_fee_gwei: Tip; the node's suggestion is used when unset
        """
        self.w3 = w3
        self.gas_multiplier = gas_multiplier
        self.gas_limit = gas_limit
        self.max_gas_price_gwei = max_gas_price_gwei
        self.priority_fee_gwei = priority_fee_gwei

    async def estimate_gas_limit(self, constructor, transaction: Dict) -> int:
        """
        Gas limit for a contract constructor call

        Args:
            constructor: web3 contract constructor
            transaction: Partial transaction ('from', 'value')

        Returns:
            Gas limit
        """
        if self.gas_limit:
            logger.debug(f"Using configured gas limit: {self.gas_limit}")
            return self.gas_limit

        # A failed estimate usually means the constructor reverts, so it propagates
        gas_estimate = await constructor.estimate_gas(transaction)
        gas_limit = int(gas_estimate * self.gas_multiplier)

        logger.debug(f"Gas estimate: {gas_estimate}, limit with buffer: {gas_limit}")
        return gas_limit

    async def get_fee_params(self) -> Dict[str, int]:
        """
        Fee fields for the next transaction

        Returns:
            {'maxFeePerGas', 'maxPriorityFeePerGas'} or {'gasPrice'} in wei
        """
        latest_block = await self.w3.eth.get_block('latest')
        base_fee_wei = latest_block.get('baseFeePerGas')

        if base_fee_wei is None:
            gas_price_wei = self._cap(await self.w3.eth.gas_price)
            logger.debug(f"Legacy gas price: {AsyncWeb3.from_wei(gas_price_wei, 'gwei')} gwei")
            return {'gasPrice': gas_price_wei}

        if self.priority_fee_gwei is not None:
            priority_fee_wei = AsyncWeb3.to_wei(self.priority_fee_gwei, 'gwei')
        else:
            priority_fee_wei = await self.w3.eth.max_priority_fee

        # Room for two full blocks of base fee growth
        max_fee_wei = self._cap(base_fee_wei * 2 + priority_fee_wei)
        priority_fee_wei = min(priority_fee_wei, max_fee_wei)

        logger.debug(
            f"EIP-1559 fees: base {base_fee_wei} wei, "
            f"max {max_fee_wei} wei, tip {priority_fee_wei} wei"
        )

        return {
            'maxFeePerGas': int(max_fee_wei),
            'maxPriorityFeePerGas': int(priority_fee_wei)
        }

    def _cap(self, price_wei: int) -> int:
        if self.max_gas_price_gwei is None:
            return int(price_wei)

        max_allowed_wei = AsyncWeb3.to_wei(self.max_gas_price_gwei, 'gwei')
        if price_wei > max_allowed_wei:
            logger.warning(
                f"Network fee {AsyncWeb3.from_wei(price_wei, 'gwei')} gwei capped at "
                f"{self.max_gas_price_gwei} gwei"
            )
        return int(min(price_wei, max_allowed_wei))

    @staticmethod
    def deployment_cost(gas_limit: int, fee_params: Dict[str, int]) -> int:
        """
        Worst-case cost of a transaction in wei

        Args:
            gas_limit: Gas limit
            fee_params: Output of get_fee_params()

        Returns:
            Cost in wei
        """
        price = fee_params.get('maxFeePerGas', fee_params.get('gasPrice', 0))
        return gas_limit * price
