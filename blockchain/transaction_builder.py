"""
Transaction Builder
Constructs contract creation transactions
"""

from typing import Dict, Sequence
from web3 import AsyncWeb3
from loguru import logger

from .nonce_manager import NonceManager


class TransactionBuilder:
    """
    Builds fully populated deployment transactions
    """

    def __init__(self, w3: AsyncWeb3, gas_calculator, nonce_manager: NonceManager, chain_id: int):
        """
        Initialize Transaction Builder

        Args:
            w3: AsyncWeb3 instance
            gas_calculator: GasCalculator for gas limit and fees
            nonce_manager: NonceManager of the sending account
            chain_id: Chain id for replay protection
        """
        self.w3 = w3
        self.gas_calculator = gas_calculator
        self.nonce_manager = nonce_manager
        self.chain_id = chain_id

    async def build_deployment_tx(
        self,
        contract_class,
        constructor_args: Sequence = (),
        sender: str = None,
        value: int = 0
    ) -> Dict:
        """
        Build transaction that deploys a contract

        Args:
            contract_class: web3 contract class with abi and bytecode
            constructor_args: Positional constructor arguments
            sender: Deploying address
            value: Wei sent to a payable constructor

        Returns:
            Transaction dict
        """
        constructor = contract_class.constructor(*constructor_args)

        gas_limit = await self.gas_calculator.estimate_gas_limit(
            constructor,
            {'from': sender, 'value': value}
        )
        fee_params = await self.gas_calculator.get_fee_params()
        nonce = await self.nonce_manager.get_nonce()

        transaction = await constructor.build_transaction({
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'value': value,
            'chainId': self.chain_id,
            **fee_params
        })

        logger.info(
            f"Deployment transaction built: nonce {nonce}, gas {gas_limit}, "
            f"chain {self.chain_id}"
        )
        return transaction
