"""Tests for LedgerReadClient retry and read conventions."""

import pytest

from config import RegistryConfig
from services.errors import ContractCallError, RpcTransportError
from services.ledger_reader import LedgerReadClient

from conftest import ATTENDEE, EVENT_ARGS, FakeLedger


class TestRead:

    def test_transient_failure_is_retried(self, ledger, reader):
        ledger.fail('owner', RpcTransportError('owner', 'connection reset'))

        assert reader.get_owner() == ledger.owner
        assert ledger.read_names().count('owner') == 2

    def test_gives_up_after_three_attempts(self, ledger, reader):
        ledger.fail('owner', *[RpcTransportError('owner', 'down') for _ in range(3)])

        with pytest.raises(RpcTransportError):
            reader.get_owner()
        assert ledger.read_names().count('owner') == 3

    def test_contract_error_is_not_retried(self, ledger, reader):
        ledger.fail('mintingFee', ContractCallError('mintingFee', 'execution reverted'))

        with pytest.raises(ContractCallError):
            reader.get_minting_fee()
        assert ledger.read_names().count('mintingFee') == 1

    def test_fixed_delay_between_attempts(self, ledger):
        delays = []
        reader = LedgerReadClient(ledger, RegistryConfig(retry_delay=1.0), sleep=delays.append)
        ledger.fail('name', RpcTransportError('name', 'x'), RpcTransportError('name', 'y'))

        assert reader.get_name() == ledger.name
        assert delays == [1.0, 1.0]

    def test_unregistered_code_reads_as_zero(self, reader):
        assert reader.get_token_id_by_event_code('NOPE') == 0

    def test_registered_code_reads_token_id(self, ledger, reader):
        ledger.register(*EVENT_ARGS)
        assert reader.get_token_id_by_event_code('B56-A64') == 1

    def test_has_user_minted_passes_checksum_address(self, ledger, reader):
        reader.has_user_minted('B56-A64', ATTENDEE)

        _, args = ledger.calls[-1]
        assert args[1] != ATTENDEE
        assert args[1].lower() == ATTENDEE


class TestVerifyDeployed:

    def test_deployed(self, reader):
        assert reader.verify_deployed() is True

    def test_empty_code(self, config):
        reader = LedgerReadClient(FakeLedger(deployed=False), config)
        assert reader.verify_deployed() is False

    def test_retries_get_code(self, ledger, reader):
        ledger.fail('getCode', RpcTransportError('eth_getCode', 'timeout'))

        assert reader.verify_deployed() is True
        assert ledger.read_names() == ['getCode', 'getCode']
