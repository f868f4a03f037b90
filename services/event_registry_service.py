"""
Event Registry Service
Create-event and mint flows for the EventNFT registry
"""

import logging

from web3 import Web3

from config import RegistryConfig
from models.event import EventRecord, MintRecord
from services.errors import (
    EventInactiveError,
    EventNotFoundError,
    NetworkMismatchError,
    WalletUnavailableError,
)
from services.idempotency_guard import EventRegistrationGuard, MintGuard
from services.identity_verifier import IdentityVerifier
from services.ledger_reader import LedgerReadClient
from services.permission_gate import PermissionGate
from services.status_reporter import StatusReporter
from services.transaction_orchestrator import TransactionKind, TransactionOrchestrator
from utils.wallet import CallSpec

logger = logging.getLogger(__name__)


class EventRegistryService:
    """Service wiring the guard checks and the orchestrator for each user action"""

    def __init__(self, ledger, wallet, config: RegistryConfig = None, reader: LedgerReadClient = None):
        self.config = config or RegistryConfig()
        self.ledger = ledger
        self.wallet = wallet
        self.reader = reader or LedgerReadClient(ledger, self.config)
        self.identity_verifier = IdentityVerifier(self.reader)
        self.permission_gate = PermissionGate(self.reader)
        self.event_guard = EventRegistrationGuard(self.reader)
        self.mint_guard = MintGuard(self.reader)
        self.status_reporter = StatusReporter()
        self.orchestrator = TransactionOrchestrator(
            ledger,
            wallet,
            confirmation_timeout=self.config.confirmation_timeout,
            on_confirmed=[self._refresh_after_confirmation],
        )
        # Last observed totalSupply; refreshed after every confirmed transaction
        self.total_minted = None

    def _refresh_after_confirmation(self, attempt):
        self.refresh_total_minted()

    def refresh_total_minted(self):
        self.total_minted = self.reader.get_total_supply()
        logger.info(f"🔍 Total minted: {self.total_minted}")
        return self.total_minted

    def _require_account(self):
        account = self.wallet.current_account()
        if not account:
            raise WalletUnavailableError("Please connect your wallet first")
        return account

    def _require_network(self):
        network_id = self.wallet.current_network_id()
        if network_id != self.config.expected_chain_id:
            raise NetworkMismatchError(self.config.expected_chain_id, network_id)

    def _call(self, function_name, *args, value=0):
        return CallSpec(
            contract_name=self.config.contract_name,
            address=self.config.contract_address,
            function_name=function_name,
            args=tuple(args),
            value=value,
        )

    def create_event(self, event: EventRecord, timeout=None):
        """
        Register an event on the contract

        Checks, in order: wallet account, network, contract identity, event
        code still free, caller is owner. Any failure ends the attempt before
        a transaction is built.

        Returns:
            TransactionAttempt: The finished attempt
        """
        state = {}

        def check_event():
            event.validate()

        def check_account():
            state['account'] = self._require_account()

        def check_identity():
            self.identity_verifier.verify_identity().raise_for_status()

        def check_free():
            self.event_guard.check_event_free(event.event_code).raise_for_status()

        def check_owner():
            self.permission_gate.check_owner(state['account']).raise_for_status()

        def build_call():
            args = event.registration_args()
            logger.info(f"🔍 Registering event with parameters: {args}")
            return self._call('registerEvent', *args)

        return self.orchestrator.run(
            TransactionKind.CREATE_EVENT,
            [check_event, check_account, self._require_network, check_identity, check_free, check_owner],
            build_call,
            timeout=timeout,
        )

    def mint(self, event_code, content_hash=None, timeout=None):
        """
        Mint the attendance NFT of an event for the connected account

        Checks, in order: wallet account, network, not already minted, event
        registered and active. The minting fee is read last and sent as value.
        Without a content hash the registered event's content hash is used.

        Returns:
            TransactionAttempt: The finished attempt
        """
        state = {}

        def check_account():
            state['account'] = self._require_account()

        def check_not_minted():
            self.mint_guard.check_not_minted(event_code, state['account']).raise_for_status()

        def check_eligible():
            state['event'] = self.get_event(event_code)
            if not state['event'].is_active:
                raise EventInactiveError(event_code)

        def build_call():
            fee = self.reader.get_minting_fee()
            logger.info(f"🔍 Minting fee: {fee} wei")
            return self._call('mintEventNFT', event_code, content_hash or state['event'].content_hash, value=fee)

        return self.orchestrator.run(
            TransactionKind.MINT,
            [check_account, self._require_network, check_not_minted, check_eligible],
            build_call,
            timeout=timeout,
        )

    def get_event(self, event_code):
        """Read an event by code; raises EventNotFoundError when the code has no token id"""
        token_id = self.reader.get_token_id_by_event_code(event_code)
        if token_id == 0:
            raise EventNotFoundError(event_code)
        return EventRecord.from_contract(token_id, self.reader.get_event_data(token_id))

    def get_mint_record(self, event_code, account):
        return MintRecord(
            event_code=event_code,
            account=account,
            has_minted=self.reader.has_user_minted(event_code, account),
        )

    def get_event_details(self, event_code, account=None):
        """Event data, minting fee and total minted, plus the mint flag of an account"""
        event = self.get_event(event_code)
        fee = self.reader.get_minting_fee()
        details = {
            'event': event.to_dict(),
            'minting_fee_wei': fee,
            'minting_fee': str(Web3.from_wei(fee, 'ether')),
            'total_minted': self.refresh_total_minted(),
            'has_minted': None,
        }
        if account:
            details['has_minted'] = self.get_mint_record(event_code, account).has_minted
        return details

    def diagnose(self, probe_event_code=None):
        return self.identity_verifier.diagnose(probe_event_code)

    def report(self, attempt):
        return self.status_reporter.report(attempt)
