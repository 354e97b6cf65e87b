"""
LoanStreamChain Deployment - Main Entry Point
Deploys the LoanStreamChain contract and prints its address
"""

import os
import sys
from loguru import logger
from dotenv import load_dotenv, find_dotenv

from deployer.config import DeployConfig
from deployer.runner import DeploymentRunner, report_failure
from utils.logger import configure_logging


def main() -> int:
    """
    Deploy once

    Returns:
        Exit code: 0 on success, 1 on any failure
    """
    # LOG_LEVEL and LOG_FILE may live in .env
    load_dotenv(find_dotenv(usecwd=True))

    configure_logging(
        level=os.getenv("LOG_LEVEL", "WARNING"),
        log_file=os.getenv("LOG_FILE")
    )

    try:
        config = DeployConfig.from_env()
    except Exception as e:
        report_failure(e)
        return 1

    logger.info(f"Deploying {config.contract_name} to {config.network_name}")
    return DeploymentRunner(config).run()


if __name__ == "__main__":
    sys.exit(main())
