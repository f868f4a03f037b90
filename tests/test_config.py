"""Tests for RegistryConfig."""

import dataclasses

import pytest

from config import CONTRACT_ADDRESS, EXPECTED_CHAIN_ID, RegistryConfig


def test_defaults():
    config = RegistryConfig.from_env({})

    assert config.contract_address == CONTRACT_ADDRESS
    assert config.expected_name == 'EthSafari Event NFTs V2'
    assert config.expected_chain_id == EXPECTED_CHAIN_ID == 8453
    assert config.retry_count == 3
    assert config.retry_delay == 1.0


def test_environment_overrides():
    config = RegistryConfig.from_env({
        'RPC_URL': 'http://localhost:8545',
        'EXPECTED_CHAIN_ID': '31337',
        'RPC_RETRY_COUNT': '5',
        'CONFIRMATION_TIMEOUT': '30',
    })

    assert config.rpc_url == 'http://localhost:8545'
    assert config.expected_chain_id == 31337
    assert config.retry_count == 5
    assert config.confirmation_timeout == 30.0


def test_empty_values_fall_back():
    assert RegistryConfig.from_env({'RPC_URL': ''}).rpc_url == RegistryConfig().rpc_url


def test_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        RegistryConfig().rpc_url = 'http://elsewhere'
