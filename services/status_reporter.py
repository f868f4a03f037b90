"""
Status Reporter
Maps transaction attempts to the small set of user-facing status categories
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from services.errors import ErrorCode
from services.transaction_orchestrator import TransactionState


class StatusCategory(Enum):
    IDLE = "idle"
    CHECKING = "checking"
    DENIED = "denied"
    ALREADY_DONE = "already_done"
    AWAITING_SIGNATURE = "awaiting_signature"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    TIMEOUT = "timeout"


STATE_CATEGORIES = {
    TransactionState.IDLE: StatusCategory.IDLE,
    TransactionState.VERIFYING: StatusCategory.CHECKING,
    TransactionState.DENIED: StatusCategory.DENIED,
    TransactionState.ALREADY_DONE: StatusCategory.ALREADY_DONE,
    TransactionState.READY: StatusCategory.AWAITING_SIGNATURE,
    TransactionState.SUBMITTING: StatusCategory.AWAITING_SIGNATURE,
    TransactionState.PENDING: StatusCategory.PENDING,
    TransactionState.CONFIRMED: StatusCategory.CONFIRMED,
    TransactionState.REJECTED_BY_WALLET: StatusCategory.FAILED,
    TransactionState.FAILED: StatusCategory.FAILED,
    TransactionState.REVERTED: StatusCategory.FAILED,
    TransactionState.TIMED_OUT: StatusCategory.TIMEOUT,
}

# Remediation text per error code
ERROR_MESSAGES = {
    ErrorCode.NOT_DEPLOYED: "Contract not found at the specified address. Please verify the contract is deployed.",
    ErrorCode.WRONG_CONTRACT: "Wrong contract! Please check the contract address.",
    ErrorCode.PERMISSION_DENIED: "Permission Denied: Only the contract owner can register events.",
    ErrorCode.ALREADY_REGISTERED: "This event is already registered on the contract.",
    ErrorCode.ALREADY_MINTED: "You have already minted an NFT for this event.",
    ErrorCode.NETWORK_MISMATCH: "Wrong network. Please switch your wallet to Base mainnet.",
    ErrorCode.WALLET_UNAVAILABLE: "Please connect your wallet first.",
    ErrorCode.USER_REJECTED: "Transaction rejected in the wallet.",
    ErrorCode.RPC_TRANSPORT_ERROR: "The network is not responding. Please try again.",
    ErrorCode.CONTRACT_CALL_ERROR: "Contract found but not readable. Please check the ABI matches the deployed contract.",
    ErrorCode.SUBMISSION_ERROR: "The transaction could not be submitted.",
    ErrorCode.REVERTED: "Transaction failed. Please try again.",
    ErrorCode.TIMEOUT: "Transaction submitted but not yet confirmed. It may still complete; check again before retrying.",
    ErrorCode.EVENT_NOT_FOUND: "Event not found. Please check the event code.",
    ErrorCode.EVENT_INACTIVE: "This event is not active.",
    ErrorCode.INVALID_EVENT: "Please check the event details.",
}

STATE_MESSAGES = {
    TransactionState.IDLE: "",
    TransactionState.VERIFYING: "Checking permissions and event status...",
    TransactionState.READY: "Preparing transaction...",
    TransactionState.SUBMITTING: "Waiting for wallet signature...",
    TransactionState.PENDING: "Transaction submitted! Waiting for confirmation...",
    TransactionState.CONFIRMED: "Success! Transaction confirmed.",
}


@dataclass(frozen=True)
class StatusReport:
    category: StatusCategory
    reason: Optional[str] = None  # error code value for DENIED/FAILED/TIMEOUT
    message: str = ""
    detail: Optional[str] = None

    def to_dict(self):
        return {
            'category': self.category.value,
            'reason': self.reason,
            'message': self.message,
            'detail': self.detail,
        }


class StatusReporter:
    """Pure mapping from attempt state and error to a StatusReport"""

    def report(self, attempt):
        return self.report_state(attempt.state, attempt.last_error)

    def report_state(self, state, error=None):
        category = STATE_CATEGORIES[state]
        if error is None:
            return StatusReport(category=category, message=STATE_MESSAGES.get(state, ""))

        return StatusReport(
            category=category,
            reason=error.code.value,
            message=ERROR_MESSAGES.get(error.code, "Transaction failed"),
            detail=error.message,
        )
