"""
Registry Errors
Error codes and exception classes raised by the event registry services
"""

from enum import Enum


class ErrorCode(Enum):
    """Error codes for registry operations"""

    NOT_DEPLOYED = "NOT_DEPLOYED"
    WRONG_CONTRACT = "WRONG_CONTRACT"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    ALREADY_MINTED = "ALREADY_MINTED"
    NETWORK_MISMATCH = "NETWORK_MISMATCH"
    WALLET_UNAVAILABLE = "WALLET_UNAVAILABLE"
    USER_REJECTED = "USER_REJECTED"
    RPC_TRANSPORT_ERROR = "RPC_TRANSPORT_ERROR"
    CONTRACT_CALL_ERROR = "CONTRACT_CALL_ERROR"
    SUBMISSION_ERROR = "SUBMISSION_ERROR"
    REVERTED = "REVERTED"
    TIMEOUT = "TIMEOUT"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    EVENT_INACTIVE = "EVENT_INACTIVE"
    INVALID_EVENT = "INVALID_EVENT"
    INVALID_TRANSITION = "INVALID_TRANSITION"


class RegistryError(Exception):
    """Base error with code and user-safe message"""

    code = None

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self):
        return f"{self.code.value}: {self.message}"


class NotDeployedError(RegistryError):
    """Raised when no bytecode exists at the configured address"""

    code = ErrorCode.NOT_DEPLOYED

    def __init__(self, address):
        super().__init__(f"Contract not found at {address}")
        self.address = address


class WrongContractError(RegistryError):
    """Raised when the contract at the address reports an unexpected name"""

    code = ErrorCode.WRONG_CONTRACT

    def __init__(self, address, expected_name, actual_name):
        super().__init__(
            f'Wrong contract at {address}: expected "{expected_name}" but got "{actual_name}"'
        )
        self.address = address
        self.expected_name = expected_name
        self.actual_name = actual_name


class PermissionDeniedError(RegistryError):
    """Raised when the caller is not the contract owner"""

    code = ErrorCode.PERMISSION_DENIED

    def __init__(self, candidate, owner_address):
        super().__init__(f"{candidate} is not the contract owner. Owner: {owner_address}")
        self.candidate = candidate
        self.owner_address = owner_address


class AlreadyRegisteredError(RegistryError):
    """Raised when an event code already has a token id"""

    code = ErrorCode.ALREADY_REGISTERED

    def __init__(self, event_code, token_id):
        super().__init__(f'Event "{event_code}" is already registered. Token ID: {token_id}')
        self.event_code = event_code
        self.token_id = token_id


class AlreadyMintedError(RegistryError):
    """Raised when an account already minted for an event"""

    code = ErrorCode.ALREADY_MINTED

    def __init__(self, event_code, account):
        super().__init__(f'{account} has already minted an NFT for event "{event_code}"')
        self.event_code = event_code
        self.account = account


class NetworkMismatchError(RegistryError):
    """Raised when the wallet is connected to the wrong chain"""

    code = ErrorCode.NETWORK_MISMATCH

    def __init__(self, expected_chain_id, actual_chain_id):
        super().__init__(
            f"Wrong network: expected chain {expected_chain_id} but connected to {actual_chain_id}"
        )
        self.expected_chain_id = expected_chain_id
        self.actual_chain_id = actual_chain_id


class WalletUnavailableError(RegistryError):
    """Raised when no wallet account is available for signing"""

    code = ErrorCode.WALLET_UNAVAILABLE

    def __init__(self, message="Wallet not connected"):
        super().__init__(message)


class UserRejectedError(RegistryError):
    """Raised when the signer declines the transaction"""

    code = ErrorCode.USER_REJECTED

    def __init__(self, message="Transaction rejected by wallet"):
        super().__init__(message)


class RpcError(RegistryError):
    """Base class for failed ledger reads"""

    def __init__(self, function_name, message, code=None):
        super().__init__(f"{function_name}: {message}", code=code)
        self.function_name = function_name
        self.detail = message


class RpcTransportError(RpcError):
    """Transient network failure talking to the RPC endpoint"""

    code = ErrorCode.RPC_TRANSPORT_ERROR


class ContractCallError(RpcError):
    """Read reverted or returned undecodable data; never retried"""

    code = ErrorCode.CONTRACT_CALL_ERROR


class SubmissionError(RegistryError):
    """Raised when a signed transaction cannot be built or sent"""

    code = ErrorCode.SUBMISSION_ERROR


class TransactionRevertedError(RegistryError):
    """Raised when the ledger rejects a submitted transaction"""

    code = ErrorCode.REVERTED

    def __init__(self, tx_hash, reason=None, receipt=None):
        message = f"Transaction {tx_hash} reverted"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.tx_hash = tx_hash
        self.reason = reason
        self.receipt = receipt


class ConfirmationTimeout(RegistryError):
    """Raised when a receipt is not observed in time; the transaction may still land"""

    code = ErrorCode.TIMEOUT

    def __init__(self, tx_hash, timeout):
        super().__init__(f"Transaction {tx_hash} not confirmed within {timeout} seconds")
        self.tx_hash = tx_hash
        self.timeout = timeout


class EventNotFoundError(RegistryError):
    """Raised when an event code has no token id"""

    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_code):
        super().__init__(f'Event "{event_code}" is not registered')
        self.event_code = event_code


class EventInactiveError(RegistryError):
    """Raised when minting is attempted for an inactive event"""

    code = ErrorCode.EVENT_INACTIVE

    def __init__(self, event_code):
        super().__init__(f'Event "{event_code}" is not active')
        self.event_code = event_code


class InvalidEventError(RegistryError):
    """Raised when event fields fail validation"""

    code = ErrorCode.INVALID_EVENT


class InvalidTransitionError(RegistryError):
    """Raised on an illegal transaction state change"""

    code = ErrorCode.INVALID_TRANSITION

    def __init__(self, current, target):
        super().__init__(f"Cannot move from {current.value} to {target.value}")
        self.current = current
        self.target = target
