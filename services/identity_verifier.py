"""
Identity Verifier
Confirms the configured address really is the expected EventNFT registry
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from services.errors import NotDeployedError, RegistryError, WrongContractError

logger = logging.getLogger(__name__)


class IdentityStatus(Enum):
    VERIFIED = "verified"
    WRONG_CONTRACT = "wrong_contract"
    NOT_DEPLOYED = "not_deployed"


@dataclass(frozen=True)
class IdentityResult:
    status: IdentityStatus
    address: str
    expected_name: str
    actual_name: Optional[str] = None

    @property
    def verified(self):
        return self.status is IdentityStatus.VERIFIED

    def raise_for_status(self):
        """Raise the matching error unless the contract was verified"""
        if self.status is IdentityStatus.NOT_DEPLOYED:
            raise NotDeployedError(self.address)
        if self.status is IdentityStatus.WRONG_CONTRACT:
            raise WrongContractError(self.address, self.expected_name, self.actual_name)
        return self


class IdentityVerifier:
    """Checks bytecode presence and the self-reported contract name"""

    def __init__(self, reader):
        self.reader = reader

    def verify_identity(self, address=None, expected_name=None):
        """
        Verify the registry contract identity

        Args:
            address (str): Contract address, defaults to the configured one
            expected_name (str): Expected name() value, defaults to the configured one

        Returns:
            IdentityResult: VERIFIED, WRONG_CONTRACT (both names attached) or NOT_DEPLOYED

        Read errors on name() propagate; they are not treated as NOT_DEPLOYED.
        """
        config = self.reader.config
        address = address or config.contract_address
        expected_name = expected_name or config.expected_name

        logger.info(f"🔍 Checking contract bytecode at {address}...")
        if not self.reader.verify_deployed(address):
            logger.error(f"❌ No contract found at {address}")
            return IdentityResult(IdentityStatus.NOT_DEPLOYED, address, expected_name)

        actual_name = self.reader.get_name()
        if actual_name != expected_name:
            logger.error(f'❌ Wrong contract! Expected "{expected_name}" but got "{actual_name}"')
            return IdentityResult(IdentityStatus.WRONG_CONTRACT, address, expected_name, actual_name)

        logger.info(f"✅ Contract verified at address: {address} ({actual_name})")
        return IdentityResult(IdentityStatus.VERIFIED, address, expected_name, actual_name)

    def diagnose(self, probe_event_code=None):
        """Run every contract check independently and collect the results.

        Unlike verify_identity, a failing check does not stop the others; each
        entry is {'ok': bool, 'value': ..., 'error': str|None}.
        """
        results = {}

        def check(key, operation):
            try:
                value = operation()
                results[key] = {'ok': True, 'value': value, 'error': None}
            except RegistryError as e:
                logger.warning(f"❌ Diagnostic {key} failed: {e}")
                results[key] = {'ok': False, 'value': None, 'error': str(e)}

        check('bytecode', self.reader.verify_deployed)
        if not results['bytecode']['value']:
            results['bytecode']['ok'] = False
            return results

        check('name', self.reader.get_name)
        if results['name']['ok']:
            results['name']['ok'] = results['name']['value'] == self.reader.config.expected_name
        check('total_supply', self.reader.get_total_supply)
        check('owner', self.reader.get_owner)
        check('minting_fee', self.reader.get_minting_fee)
        if probe_event_code:
            check('event', lambda: self.reader.get_token_id_by_event_code(probe_event_code))
            if results['event']['ok']:
                results['event']['ok'] = results['event']['value'] > 0
        return results
