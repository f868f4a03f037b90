from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, TimeExhausted, Web3Exception
import requests
import json
import re
import logging
from pathlib import Path

from config import RegistryConfig
from services.errors import (
    ConfirmationTimeout,
    ContractCallError,
    RpcTransportError,
)

logger = logging.getLogger(__name__)

# Failures worth retrying: the request never produced a ledger answer
TRANSIENT_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    requests.exceptions.HTTPError,
    ConnectionError,
    TimeoutError,
)

# JSON-RPC replies meaning the node could not answer right now (rate limit, internal error)
TRANSIENT_RPC_CODES = frozenset({429, -32005, -32603})
SERVER_ERROR_CODES = range(-32099, -31999)
RPC_CODE_PATTERN = re.compile(r"""['"]code['"]\s*:\s*(-?\d+)""")


def rpc_error_code(error):
    """JSON-RPC error code carried by a web3 exception, or None"""
    response = getattr(error, 'rpc_response', None)
    if isinstance(response, dict) and isinstance(response.get('error'), dict):
        return response['error'].get('code')
    if error.args and isinstance(error.args[0], dict):
        return error.args[0].get('code')
    match = RPC_CODE_PATTERN.search(str(error))
    return int(match.group(1)) if match else None


def translate_rpc_error(function_name, error):
    """Map a node error reply to a retryable transport error or a contract error"""
    code = rpc_error_code(error)
    if code in TRANSIENT_RPC_CODES or code in SERVER_ERROR_CODES:
        return RpcTransportError(function_name, str(error))
    return ContractCallError(function_name, str(error))


class Web3Service:
    """Service for Web3 interactions with the EventNFT registry"""

    def __init__(self, config: RegistryConfig = None, w3=None):
        self.config = config or RegistryConfig.from_env()

        # Connect to blockchain
        if w3 is None:
            logger.info(f"🔗 Connecting to blockchain at: {self.config.rpc_url}")
            w3 = Web3(Web3.HTTPProvider(
                self.config.rpc_url,
                request_kwargs={'timeout': self.config.rpc_timeout},
            ))
        self.w3 = w3

        # Load contract ABIs
        self.contracts_dir = Path(__file__).parent.parent / 'contracts' / 'artifacts'
        self.contract_abis = {}
        self._load_contract_abis()

    def _load_contract_abis(self):
        """Load all contract ABIs from the artifacts directory"""
        if not self.contracts_dir.exists():
            logger.warning(f"Contracts directory not found: {self.contracts_dir}")
            return

        for abi_file in self.contracts_dir.glob('*.json'):
            with open(abi_file, 'r') as f:
                abi_data = json.load(f)
            self.contract_abis[abi_file.stem] = abi_data['abi']
            logger.debug(f"✅ Loaded {abi_file.stem} ABI")

    def is_connected(self):
        """Check the RPC endpoint answers"""
        try:
            block_number = self.w3.eth.block_number
            logger.info(f"✅ Blockchain connected successfully! Current block: {block_number}")
            return True
        except TRANSIENT_ERRORS + (Web3Exception,) as e:
            logger.error(f"❌ Failed to connect to blockchain: {e}")
            return False

    def get_chain_id(self):
        """Chain id reported by the RPC endpoint"""
        try:
            return self.w3.eth.chain_id
        except TRANSIENT_ERRORS as e:
            raise RpcTransportError('eth_chainId', str(e)) from e
        except Web3Exception as e:
            raise translate_rpc_error('eth_chainId', e) from e

    def get_code(self, address):
        """Get deployed bytecode at an address (empty bytes when nothing is deployed)"""
        try:
            return bytes(self.w3.eth.get_code(self.to_checksum_address(address)))
        except TRANSIENT_ERRORS as e:
            raise RpcTransportError('eth_getCode', str(e)) from e
        except Web3Exception as e:
            raise translate_rpc_error('eth_getCode', e) from e

    def call_contract_function(self, contract_name, contract_address, function_name, *args):
        """Call a contract function (read-only)"""
        contract = self.get_contract(contract_address, contract_name)

        # Get the function
        function = getattr(contract.functions, function_name)

        try:
            return function(*args).call()
        except TRANSIENT_ERRORS as e:
            raise RpcTransportError(function_name, str(e)) from e
        except (ContractLogicError, BadFunctionCallOutput) as e:
            raise ContractCallError(function_name, str(e)) from e
        except Web3Exception as e:
            raise translate_rpc_error(function_name, e) from e

    def build_contract_transaction(self, call_spec, from_address):
        """Build an unsigned transaction for a contract call; gas is estimated by the node"""
        contract = self.get_contract(call_spec.address, call_spec.contract_name)
        function = getattr(contract.functions, call_spec.function_name)

        sender = self.to_checksum_address(from_address)
        tx_params = {
            'from': sender,
            'value': int(call_spec.value or 0),
            'nonce': self.w3.eth.get_transaction_count(sender, 'pending'),
            'chainId': self.w3.eth.chain_id,
        }
        logger.info(f"🔧 Building {call_spec.function_name} transaction with args: {call_spec.args}")
        return function(*call_spec.args).build_transaction(tx_params)

    def send_raw_transaction(self, raw_tx):
        """Broadcast a signed transaction and return its hash as hex"""
        tx_hash = self.w3.eth.send_raw_transaction(raw_tx)
        return Web3.to_hex(tx_hash)

    def wait_for_transaction(self, tx_hash, timeout=None):
        """Wait for a transaction to be mined"""
        timeout = self.config.confirmation_timeout if timeout is None else timeout
        try:
            return self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TimeExhausted as e:
            raise ConfirmationTimeout(tx_hash, timeout) from e
        except TRANSIENT_ERRORS as e:
            raise RpcTransportError('eth_getTransactionReceipt', str(e)) from e
        except Web3Exception as e:
            raise translate_rpc_error('eth_getTransactionReceipt', e) from e

    def to_checksum_address(self, address):
        """Convert address to checksum format"""
        return self.w3.to_checksum_address(address)

    def get_contract_abi(self, contract_name):
        """Get contract ABI by name"""
        if contract_name in self.contract_abis:
            return self.contract_abis[contract_name]
        else:
            raise ValueError(f"ABI not found for contract: {contract_name}")

    def get_contract(self, address, contract_name):
        """Get a contract instance by name and address"""
        return self.w3.eth.contract(
            address=self.to_checksum_address(address),
            abi=self.get_contract_abi(contract_name),
        )
