"""
RPC Manager
Connects to the target network, falling back through the configured endpoints
"""

from typing import List, Optional
from web3 import AsyncWeb3
from web3.middleware import ExtraDataToPOAMiddleware
from loguru import logger

from blockchain.exceptions import NetworkConnectionError, ChainIdMismatchError


class RPCManager:
    """
    Ordered RPC endpoint list

    The first endpoint that answers is used for the whole run;
    later ones are only tried when earlier ones are unreachable.
    """

    def __init__(
        self,
        rpc_urls: List[str],
        chain_id: Optional[int] = None,
        poa: bool = False,
        network_name: str = 'localhost'
    ):
        """
        Initialize RPC Manager

        Args:
            rpc_urls: Endpoints in priority order
            chain_id: Expected chain id (None = accept whatever the node reports)
            poa: Inject the POA extraData middleware (Polygon, BSC, ...)
            network_name: Label used in logs
        """
        if not rpc_urls:
            raise NetworkConnectionError(f"No RPC URL configured for network '{network_name}'")

        self.rpc_urls = rpc_urls
        self.expected_chain_id = chain_id
        self.poa = poa
        self.network_name = network_name

        self.w3: Optional[AsyncWeb3] = None
        self.chain_id: Optional[int] = None

        # Every instance created, reachable or not; each holds an HTTP session
        self._connections: List[AsyncWeb3] = []

    async def get_web3(self) -> AsyncWeb3:
        """
        Connected AsyncWeb3 instance

        Returns:
            AsyncWeb3 bound to the first reachable endpoint
        """
        if self.w3 is not None:
            return self.w3

        for index, url in enumerate(self.rpc_urls, start=1):
            w3 = self._create_web3(url)
            self._connections.append(w3)

            if await w3.is_connected():
                logger.info(f"Connected to {self.network_name} via endpoint {index}/{len(self.rpc_urls)}")
                await self._check_chain_id(w3)
                self.w3 = w3
                return w3

            logger.warning(f"Endpoint {index}/{len(self.rpc_urls)} for {self.network_name} unreachable")

        raise NetworkConnectionError(
            f"Failed to connect to {self.network_name}: "
            f"all {len(self.rpc_urls)} RPC endpoints unreachable"
        )

    def _create_web3(self, url: str) -> AsyncWeb3:
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(url))

        if self.poa:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        return w3

    async def _check_chain_id(self, w3: AsyncWeb3):
        chain_id = await w3.eth.chain_id

        if self.expected_chain_id is not None and chain_id != self.expected_chain_id:
            raise ChainIdMismatchError(self.expected_chain_id, chain_id)

        self.chain_id = chain_id
        logger.debug(f"Chain id: {chain_id}")


    async def close(self):
        """Close the HTTP sessions of every endpoint tried"""
        for w3 in self._connections:
            await w3.provider.disconnect()

        if self._connections:
            logger.debug(f"Closed {len(self._connections)} connection(s) to {self.network_name}")

        self._connections = []
        self.w3 = None
