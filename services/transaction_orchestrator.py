"""
Transaction Orchestrator
Runs guard checks in order, then submits a contract call and tracks it to confirmation
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from services.errors import (
    AlreadyMintedError,
    AlreadyRegisteredError,
    ConfirmationTimeout,
    EventInactiveError,
    InvalidTransitionError,
    PermissionDeniedError,
    RegistryError,
    RpcError,
    TransactionRevertedError,
    UserRejectedError,
)

logger = logging.getLogger(__name__)


class TransactionKind(Enum):
    CREATE_EVENT = "create_event"
    MINT = "mint"


class TransactionState(Enum):
    IDLE = "idle"
    VERIFYING = "verifying"
    DENIED = "denied"
    ALREADY_DONE = "already_done"
    READY = "ready"
    SUBMITTING = "submitting"
    REJECTED_BY_WALLET = "rejected_by_wallet"
    FAILED = "failed"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"
    TIMED_OUT = "timed_out"


TRANSITIONS = {
    TransactionState.IDLE: {TransactionState.VERIFYING},
    TransactionState.VERIFYING: {
        TransactionState.DENIED,
        TransactionState.ALREADY_DONE,
        TransactionState.FAILED,
        TransactionState.READY,
    },
    TransactionState.READY: {TransactionState.SUBMITTING},
    TransactionState.SUBMITTING: {
        TransactionState.REJECTED_BY_WALLET,
        TransactionState.FAILED,
        TransactionState.PENDING,
    },
    TransactionState.PENDING: {
        TransactionState.CONFIRMED,
        TransactionState.REVERTED,
        TransactionState.TIMED_OUT,
    },
}

TERMINAL_STATES = frozenset(state for state in TransactionState if state not in TRANSITIONS)

# Gate failures that end the attempt as DENIED or ALREADY_DONE instead of FAILED
DENIAL_ERRORS = (PermissionDeniedError, EventInactiveError)
ALREADY_DONE_ERRORS = (AlreadyRegisteredError, AlreadyMintedError)


@dataclass
class TransactionAttempt:
    """One run of a flow; never persisted"""
    kind: TransactionKind
    state: TransactionState = TransactionState.IDLE
    last_error: Optional[RegistryError] = None
    tx_hash: Optional[str] = None
    receipt: Any = None
    history: List[TransactionState] = field(default_factory=list)

    @property
    def is_terminal(self):
        return self.state in TERMINAL_STATES

    def transition(self, new_state, error=None):
        if new_state not in TRANSITIONS.get(self.state, ()):
            raise InvalidTransitionError(self.state, new_state)
        self.history.append(self.state)
        self.state = new_state
        if error is not None:
            self.last_error = error
        logger.info(f"🔧 {self.kind.value}: {self.history[-1].value} -> {new_state.value}")

    def to_dict(self):
        return {
            'kind': self.kind.value,
            'state': self.state.value,
            'tx_hash': self.tx_hash,
            'error_code': self.last_error.code.value if self.last_error else None,
            'error': self.last_error.message if self.last_error else None,
            'history': [state.value for state in self.history],
        }


class TransactionOrchestrator:
    """Composes guard checks with submission and confirmation.

    Keeps no counters of its own; callers that cache ledger aggregates pass
    `on_confirmed` callbacks to refresh them after a confirmed transaction.
    """

    def __init__(self, ledger, wallet, confirmation_timeout=None, on_confirmed=None):
        self.ledger = ledger
        self.wallet = wallet
        self.confirmation_timeout = confirmation_timeout
        self.on_confirmed = list(on_confirmed or [])

    def submit(self, call_spec):
        """Hand the call to the wallet; returns the tx hash"""
        logger.info(f"🔧 Submitting {call_spec.function_name} to {call_spec.address}")
        return self.wallet.sign_and_send(call_spec)

    def await_confirmation(self, tx_hash, timeout=None):
        """
        Wait for the receipt of a submitted transaction

        Raises:
            TransactionRevertedError: receipt status is not 1
            ConfirmationTimeout: no receipt within the timeout; the tx may still land
        """
        timeout = self.confirmation_timeout if timeout is None else timeout
        receipt = self.ledger.wait_for_transaction(tx_hash, timeout)
        if receipt.get('status') != 1:
            raise TransactionRevertedError(tx_hash, reason=receipt.get('revertReason'), receipt=receipt)
        return receipt

    def run(self, kind, checks, build_call, timeout=None):
        """
        Drive one attempt through the state machine

        Args:
            kind (TransactionKind): What the attempt does
            checks (list): Callables run in order; each raises a RegistryError to stop the attempt
            build_call (callable): Returns the CallSpec once every check passed
            timeout (float): Confirmation ceiling override

        Returns:
            TransactionAttempt: The attempt in a terminal state
        """
        attempt = TransactionAttempt(kind=kind)
        attempt.transition(TransactionState.VERIFYING)

        try:
            for check in checks:
                check()
            call_spec = build_call()
        except ALREADY_DONE_ERRORS as e:
            attempt.transition(TransactionState.ALREADY_DONE, e)
            return attempt
        except DENIAL_ERRORS as e:
            attempt.transition(TransactionState.DENIED, e)
            return attempt
        except RegistryError as e:
            logger.error(f"❌ {kind.value} verification failed: {e}")
            attempt.transition(TransactionState.FAILED, e)
            return attempt

        attempt.transition(TransactionState.READY)
        attempt.transition(TransactionState.SUBMITTING)
        try:
            attempt.tx_hash = self.submit(call_spec)
        except UserRejectedError as e:
            attempt.transition(TransactionState.REJECTED_BY_WALLET, e)
            return attempt
        except RegistryError as e:
            logger.error(f"❌ {kind.value} submission failed: {e}")
            attempt.transition(TransactionState.FAILED, e)
            return attempt

        attempt.transition(TransactionState.PENDING)
        try:
            attempt.receipt = self.await_confirmation(attempt.tx_hash, timeout)
        except TransactionRevertedError as e:
            attempt.receipt = e.receipt
            logger.error(f"❌ {e}")
            attempt.transition(TransactionState.REVERTED, e)
            return attempt
        except (ConfirmationTimeout, RpcError) as e:
            # Outcome unknown: the transaction may still confirm later
            logger.warning(f"⚠️ {e}")
            attempt.transition(TransactionState.TIMED_OUT, e)
            return attempt

        attempt.transition(TransactionState.CONFIRMED)
        logger.info(f"✅ {kind.value} confirmed: {attempt.tx_hash}")
        for callback in self.on_confirmed:
            try:
                callback(attempt)
            except RegistryError as e:
                logger.warning(f"⚠️ Post-confirmation refresh failed: {e}")
        return attempt
