"""
Deployment Recorder
Persists deployed addresses for later tooling
"""

import os
import json
from datetime import datetime, timezone
from typing import Dict, List, Optional
from loguru import logger
from dotenv import set_key


class DeploymentRecorder:
    """
    Writes deployments/<network>/<Contract>.json and, optionally,
    <CONTRACT>_ADDRESS into the .env file
    """

    def __init__(
        self,
        network_name: str,
        deployments_dir: str = 'deployments',
        save_deployments: bool = True,
        update_env_file: bool = False,
        env_path: str = '.env'
    ):
        self.network_name = network_name
        self.deployments_dir = deployments_dir
        self.save_deployments = save_deployments
        self.update_env_file = update_env_file
        self.env_path = env_path

    @property
    def enabled(self) -> bool:
        return self.save_deployments or self.update_env_file

    def record(self, deployment, abi: List[Dict], chain_id: Optional[int] = None):
        """
        Record a confirmed deployment
        Failures are logged, never raised: the contract is already on-chain

        Args:
            deployment: Confirmed ContractDeployment
            abi: Contract ABI
            chain_id: Chain the contract lives on
        """
        if self.save_deployments:
            try:
                path = self.write_record(deployment, abi, chain_id)
                logger.info(f"Deployment record written to {path}")
            except OSError as e:
                logger.warning(f"Could not write deployment record: {e}")

        if self.update_env_file:
            try:
                key = self.env_key(deployment.contract_name)
                set_key(self.env_path, key, deployment.address, quote_mode='never')
                logger.info(f"Updated {self.env_path}: {key}={deployment.address}")
            except OSError as e:
                logger.warning(f"Could not update {self.env_path}: {e}")

    def write_record(self, deployment, abi: List[Dict], chain_id: Optional[int] = None) -> str:
        """
        Write the JSON record

        Returns:
            Path of the written file
        """
        network_dir = os.path.join(self.deployments_dir, self.network_name)
        os.makedirs(network_dir, exist_ok=True)

        receipt = deployment.receipt or {}
        record = {
            'contractName': deployment.contract_name,
            'address': deployment.address,
            'transactionHash': deployment.tx_hash,
            'blockNumber': receipt.get('blockNumber'),
            'gasUsed': receipt.get('gasUsed'),
            'deployer': deployment.sender,
            'nonce': deployment.nonce,
            'network': self.network_name,
            'chainId': chain_id,
            'deployedAt': datetime.now(timezone.utc).isoformat(),
            'abi': abi
        }

        path = os.path.join(network_dir, f"{deployment.contract_name}.json")
        with open(path, 'w') as f:
            json.dump(record, f, indent=2)

        return path

    @staticmethod
    def env_key(contract_name: str) -> str:
        """LoanStreamChain -> LOAN_STREAM_CHAIN_ADDRESS"""
        parts = []
        for index, char in enumerate(contract_name):
            if char.isupper() and index > 0 and not contract_name[index - 1].isupper():
                parts.append('_')
            parts.append(char.upper())
        return ''.join(parts) + '_ADDRESS'
