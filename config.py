# Event registry configuration
# Defaults match the Base mainnet deployment; override through environment variables.

import os
from dataclasses import dataclass

CONTRACT_ADDRESS = "0xef83c6e7953d028d637e416f581ae2fa836ebae8"
CONTRACT_NAME = "EventNFT"  # ABI artifact name
EXPECTED_CONTRACT_NAME = "EthSafari Event NFTs V2"
EXPECTED_CHAIN_ID = 8453  # Base mainnet

RPC_URL = "https://base.drpc.org"
RPC_TIMEOUT = 60
RPC_RETRY_COUNT = 3
RPC_RETRY_DELAY = 1.0

CONFIRMATION_TIMEOUT = 300

FLASK_PORT = 5000


@dataclass(frozen=True)
class RegistryConfig:
    """Deployment identity and transport settings passed to every registry component"""

    contract_address: str = CONTRACT_ADDRESS
    expected_name: str = EXPECTED_CONTRACT_NAME
    expected_chain_id: int = EXPECTED_CHAIN_ID
    contract_name: str = CONTRACT_NAME
    rpc_url: str = RPC_URL
    rpc_timeout: float = RPC_TIMEOUT
    retry_count: int = RPC_RETRY_COUNT
    retry_delay: float = RPC_RETRY_DELAY
    confirmation_timeout: float = CONFIRMATION_TIMEOUT

    @classmethod
    def from_env(cls, environ=None):
        """Build a config from environment variables, falling back to the defaults"""
        environ = os.environ if environ is None else environ
        return cls(
            contract_address=environ.get('CONTRACT_ADDRESS') or CONTRACT_ADDRESS,
            expected_name=environ.get('EXPECTED_CONTRACT_NAME') or EXPECTED_CONTRACT_NAME,
            expected_chain_id=int(environ.get('EXPECTED_CHAIN_ID') or EXPECTED_CHAIN_ID),
            rpc_url=environ.get('RPC_URL') or RPC_URL,
            rpc_timeout=float(environ.get('RPC_TIMEOUT') or RPC_TIMEOUT),
            retry_count=int(environ.get('RPC_RETRY_COUNT') or RPC_RETRY_COUNT),
            retry_delay=float(environ.get('RPC_RETRY_DELAY') or RPC_RETRY_DELAY),
            confirmation_timeout=float(environ.get('CONFIRMATION_TIMEOUT') or CONFIRMATION_TIMEOUT),
        )
