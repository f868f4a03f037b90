"""
Wallet signer capability used by the transaction orchestrator
"""

import logging
from dataclasses import dataclass, field

import requests
from eth_account import Account
from web3.exceptions import Web3Exception

from services.errors import SubmissionError, UserRejectedError, WalletUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallSpec:
    """A state-changing contract call waiting to be signed"""
    contract_name: str
    address: str
    function_name: str
    args: tuple = field(default_factory=tuple)
    value: int = 0  # wei


class LocalAccountWallet:
    """Signs with a private key held by the server.

    `approve` is an optional callable receiving the CallSpec; returning False
    declines the signature, the way a user rejects a wallet prompt.
    """

    def __init__(self, web3_service, private_key=None, approve=None):
        self.web3_service = web3_service
        self.account = Account.from_key(private_key) if private_key else None
        self.approve = approve
        if self.account:
            logger.info(f"🔍 Wallet: signing as {self.account.address}")

    def current_account(self):
        """Connected account address, or None"""
        return self.account.address if self.account else None

    def current_network_id(self):
        return self.web3_service.get_chain_id()

    def sign_and_send(self, call_spec):
        """Build, sign and broadcast a contract call; returns the tx hash"""
        if not self.account:
            raise WalletUnavailableError("No signing key configured")

        if self.approve is not None and not self.approve(call_spec):
            raise UserRejectedError(f"{call_spec.function_name} rejected by signer")

        try:
            tx = self.web3_service.build_contract_transaction(call_spec, self.account.address)
            signed_tx = self.account.sign_transaction(tx)
            # Handle both old and new eth-account versions
            raw_tx = getattr(signed_tx, 'raw_transaction', None) or getattr(signed_tx, 'rawTransaction', None)
            tx_hash = self.web3_service.send_raw_transaction(raw_tx)
        except (ValueError, TypeError, Web3Exception, requests.exceptions.RequestException) as e:
            logger.error(f"❌ Error executing {call_spec.function_name}: {e}")
            raise SubmissionError(f"{call_spec.function_name}: {e}") from e

        logger.info(f"✅ Transaction sent successfully: {tx_hash}")
        return tx_hash
