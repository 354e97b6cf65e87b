"""
Deployment Runner
Deploys the configured contract once and reports its address
"""

import asyncio
from typing import Optional
from loguru import logger

from utils.logger import log_result
from .config import DeployConfig
from .toolchain import Toolchain
from .deployment_recorder import DeploymentRecorder


def report_failure(error: BaseException):
    """Write the full error, traceback included, to the error sink"""
    logger.opt(exception=error).error(f"Deployment failed: {error}")


class DeploymentRunner:
    """
    factory -> deploy -> wait for confirmation -> print address

    Steps run strictly in order; the first error aborts the run.
    """

    def __init__(
        self,
        config: DeployConfig,
        toolchain: Optional[Toolchain] = None,
        recorder: Optional[DeploymentRecorder] = None
    ):
        """
        Initialize Deployment Runner

        Args:
            config: Deployment settings
            toolchain: Toolchain providing contract factories (built from config when None)
            recorder: Deployment recorder (built from config when None)
        """
        self.config = config
        self.toolchain = toolchain or Toolchain(config)
        self.recorder = recorder or DeploymentRecorder(
            config.network_name,
            deployments_dir=config.deployments_dir,
            save_deployments=config.save_deployments,
            update_env_file=config.update_env_file
        )

    async def deploy(self) -> str:
        """
        Deploy the contract

        Returns:
            Deployed contract address
        """
        contract_name = self.config.contract_name

        try:
            factory = await self.toolchain.get_contract_factory(contract_name)
            deployment = await factory.deploy()
            await deployment.deployed()
        finally:
            await self.toolchain.rpc_manager.close()

        log_result(f"{contract_name} contract deployed to: {deployment.address}")

        if self.recorder.enabled:
            self.recorder.record(
                deployment,
                factory.artifact.abi,
                chain_id=self.toolchain.rpc_manager.chain_id
            )

        return deployment.address

    def run(self) -> int:
        """
        Run the deployment to completion

        Returns:
            Process exit code: 0 on success, 1 on any failure
        """
        try:
            asyncio.run(self.deploy())
        except Exception as e:
            report_failure(e)
            return 1

        return 0
