"""
Idempotency Guards
Point-in-time checks that a registration or mint has not already happened.

A free result is not a lock: two concurrent flows can both pass and both
submit. The contract rejects the second one at execution time.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from services.errors import AlreadyMintedError, AlreadyRegisteredError
from utils.formatting import short_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardResult:
    free: bool
    event_code: str
    account: Optional[str] = None
    token_id: int = 0

    def raise_for_status(self):
        if self.free:
            return self
        if self.account is not None:
            raise AlreadyMintedError(self.event_code, self.account)
        raise AlreadyRegisteredError(self.event_code, self.token_id)


class EventRegistrationGuard:
    """Checks an event code has no token id yet"""

    def __init__(self, reader):
        self.reader = reader

    def check_event_free(self, event_code):
        token_id = self.reader.get_token_id_by_event_code(event_code)
        if token_id > 0:
            logger.info(f'🔍 Event "{event_code}" is already registered! Token ID: {token_id}')
            return GuardResult(free=False, event_code=event_code, token_id=token_id)
        return GuardResult(free=True, event_code=event_code)


class MintGuard:
    """Checks an account has not minted the NFT of an event"""

    def __init__(self, reader):
        self.reader = reader

    def check_not_minted(self, event_code, account):
        if self.reader.has_user_minted(event_code, account):
            logger.info(f'🔍 {short_address(account)} has already minted for "{event_code}"')
            return GuardResult(free=False, event_code=event_code, account=account)
        return GuardResult(free=True, event_code=event_code)
