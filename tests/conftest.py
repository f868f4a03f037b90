"""Pytest configuration and shared fixtures.

FakeLedger stands in for Web3Service with an in-memory EventNFT contract;
FakeWallet stands in for the signer and executes calls against it.
"""

import itertools
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import RegistryConfig
from services.errors import ConfirmationTimeout, UserRejectedError, WalletUnavailableError

OWNER = '0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266'
ATTENDEE = '0x70997970c51812dc3a010c7d01b50e0d17dc79c8'
STRANGER = '0x3c44cdddb6a900fa2b585dd299e03d12fa4293bc'
EXPECTED_NAME = 'EthSafari Event NFTs V2'
MINTING_FEE = 10 ** 15

EVENT_ARGS = (
    'B56-A64',
    'Side Event: Touch Base @EthSafari 2025',
    'Kilifi Bay Beach Resort',
    1757689200,
    'Eddie Kago',
    7,
    'ipfs://bafkreiat5vst4hwcor3uctfre3rhie34ginwy7hvtqjubs3enjeykjinpa',
)


class FakeLedger:
    """In-memory EventNFT contract with the Web3Service read/receipt interface"""

    def __init__(self, name=EXPECTED_NAME, owner=OWNER, deployed=True, minting_fee=MINTING_FEE):
        self.code = b'\x60\x80\x60\x40' if deployed else b''
        self.name = name
        self.owner = owner
        self.minting_fee = minting_fee
        self.token_ids = {}    # event code -> token id
        self.event_data = {}   # token id -> getEventData tuple
        self.minted = set()    # (event code, lowercased account)
        self.total_supply = 0
        self.receipts = {}
        self.calls = []        # (function name, args) for every read
        self.failures = {}     # function name -> exceptions raised before answering
        self.confirmation_times_out = False
        self._hashes = itertools.count(1)

    def fail(self, function_name, *errors):
        self.failures.setdefault(function_name, []).extend(errors)

    def _maybe_fail(self, function_name):
        pending = self.failures.get(function_name)
        if pending:
            raise pending.pop(0)

    def get_code(self, address):
        self.calls.append(('getCode', (address,)))
        self._maybe_fail('getCode')
        return self.code

    def call_contract_function(self, contract_name, contract_address, function_name, *args):
        self.calls.append((function_name, args))
        self._maybe_fail(function_name)
        if function_name == 'name':
            return self.name
        if function_name == 'owner':
            return self.owner
        if function_name == 'totalSupply':
            return self.total_supply
        if function_name == 'mintingFee':
            return self.minting_fee
        if function_name == 'getTokenIdByEventCode':
            return self.token_ids.get(args[0], 0)
        if function_name == 'getEventData':
            return self.event_data[args[0]]
        if function_name == 'hasUserMinted':
            return (args[0], args[1].lower()) in self.minted
        raise AssertionError(f"unexpected read {function_name}")

    def register(self, *args, active=True):
        """Register an event directly, as if a prior transaction confirmed"""
        token_id = len(self.token_ids) + 1
        self.token_ids[args[0]] = token_id
        self.event_data[token_id] = tuple(args) + (active,)
        return token_id

    def execute(self, call_spec, sender):
        """Apply a signed call with the contract's own rules; returns the tx hash"""
        tx_hash = f"0x{next(self._hashes):064x}"
        status = 1
        args = call_spec.args
        if call_spec.function_name == 'registerEvent':
            if sender.lower() != self.owner.lower() or args[0] in self.token_ids:
                status = 0
            else:
                self.register(*args)
        elif call_spec.function_name == 'mintEventNFT':
            key = (args[0], sender.lower())
            if args[0] not in self.token_ids or key in self.minted or call_spec.value < self.minting_fee:
                status = 0
            else:
                self.minted.add(key)
                self.total_supply += 1
        else:
            raise AssertionError(f"unexpected write {call_spec.function_name}")
        self.receipts[tx_hash] = {'transactionHash': tx_hash, 'status': status}
        return tx_hash

    def wait_for_transaction(self, tx_hash, timeout=None):
        if self.confirmation_times_out:
            raise ConfirmationTimeout(tx_hash, timeout)
        return self.receipts[tx_hash]

    def read_names(self):
        return [name for name, _ in self.calls]


class FakeWallet:
    """Signer that executes calls on a FakeLedger"""

    def __init__(self, ledger, account=OWNER, network_id=8453, reject=False):
        self.ledger = ledger
        self.account = account
        self.network_id = network_id
        self.reject = reject
        self.sent = []

    def current_account(self):
        return self.account

    def current_network_id(self):
        return self.network_id

    def sign_and_send(self, call_spec):
        if not self.account:
            raise WalletUnavailableError()
        if self.reject:
            raise UserRejectedError()
        self.sent.append(call_spec)
        return self.ledger.execute(call_spec, self.account)


@pytest.fixture
def config():
    return RegistryConfig(retry_delay=0, confirmation_timeout=5)


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def wallet(ledger):
    return FakeWallet(ledger)


@pytest.fixture
def reader(ledger, config):
    from services.ledger_reader import LedgerReadClient
    return LedgerReadClient(ledger, config)


@pytest.fixture
def registry(ledger, wallet, config):
    from services.event_registry_service import EventRegistryService
    return EventRegistryService(ledger, wallet, config)
