import logging
from dataclasses import dataclass

from services.errors import PermissionDeniedError
from utils.formatting import addresses_equal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionResult:
    allowed: bool
    candidate: str
    owner_address: str

    def raise_for_status(self):
        if not self.allowed:
            raise PermissionDeniedError(self.candidate, self.owner_address)
        return self


class PermissionGate:
    """Owner check for restricted registry actions.

    The owner is read on every call and never cached.
    """

    def __init__(self, reader):
        self.reader = reader

    def check_owner(self, candidate):
        owner = self.reader.get_owner()
        allowed = addresses_equal(candidate, owner)
        if allowed:
            logger.info(f"✅ Permission verified for {candidate}")
        else:
            logger.warning(f"❌ Permission Denied: {candidate} is not the contract owner. Owner: {owner}")
        return PermissionResult(allowed=allowed, candidate=candidate, owner_address=owner)
