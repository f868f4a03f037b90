"""
Ledger Read Client
Point-in-time reads against the EventNFT registry with transport-level retry
"""

import logging
import time

from web3 import Web3

from config import RegistryConfig
from services.errors import RpcTransportError

logger = logging.getLogger(__name__)


class LedgerReadClient:
    """Read-only access to the registry contract.

    Nothing is cached: every call goes to the current ledger head. Transient
    transport failures are retried with a fixed delay, contract reverts and
    decode failures surface immediately.
    """

    def __init__(self, ledger, config: RegistryConfig = None, sleep=time.sleep):
        self.ledger = ledger
        self.config = config or RegistryConfig()
        self._sleep = sleep

    def _with_retry(self, label, operation):
        attempts = max(1, self.config.retry_count)
        for attempt in range(1, attempts + 1):
            try:
                return operation()
            except RpcTransportError as e:
                if attempt == attempts:
                    logger.error(f"❌ {label} failed after {attempts} attempts: {e}")
                    raise
                logger.warning(f"⚠️ {label} attempt {attempt}/{attempts} failed: {e}; retrying")
                self._sleep(self.config.retry_delay)

    def read(self, function_name, *args):
        """Call a view function on the registry contract"""
        return self._with_retry(
            function_name,
            lambda: self.ledger.call_contract_function(
                self.config.contract_name,
                self.config.contract_address,
                function_name,
                *args
            ),
        )

    def verify_deployed(self, address=None):
        """True iff the address holds non-empty bytecode"""
        address = address or self.config.contract_address
        code = self._with_retry('getCode', lambda: self.ledger.get_code(address))
        deployed = bool(code) and code not in (b'\x00', '0x')
        logger.debug(f"🔍 Bytecode at {address}: {len(code or b'')} bytes")
        return deployed

    def get_name(self):
        return self.read('name')

    def get_owner(self):
        return self.read('owner')

    def get_total_supply(self):
        return int(self.read('totalSupply'))

    def get_minting_fee(self):
        """Current minting fee in wei"""
        return int(self.read('mintingFee'))

    def get_token_id_by_event_code(self, event_code):
        """Token id for an event code; 0 means not registered"""
        return int(self.read('getTokenIdByEventCode', event_code) or 0)

    def get_event_data(self, token_id):
        return self.read('getEventData', token_id)

    def has_user_minted(self, event_code, account):
        return bool(self.read('hasUserMinted', event_code, Web3.to_checksum_address(account)))
