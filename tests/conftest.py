"""
Pytest fixtures: generated credentials, the fake gateway service and a recording console.
"""
import io

import pytest
from rich.console import Console

from assetgw.config import GatewayConfig
from assetgw.msp.identity import Identity, Signer
from tests.fakes import CryptoMaterial, FakeGatewayService, FakePeer

CLIENT_VARIABLES = ['ASSETGW_CONFIG', 'LOG_LEVEL']


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in list(GatewayConfig.model_fields) + CLIENT_VARIABLES:
        monkeypatch.delenv(name.upper(), raising=False)


@pytest.fixture
def setenv(monkeypatch):
    def setenv(values):
        for name, value in values.items():
            monkeypatch.setenv(name, value)
    return setenv


@pytest.fixture
def crypto_material(tmp_path):
    return CryptoMaterial(tmp_path / 'org1.example.com')


@pytest.fixture
def identity(crypto_material):
    return Identity('Org1MSP', crypto_material.cert_pem)


@pytest.fixture
def signer(crypto_material):
    return Signer(crypto_material.key)


@pytest.fixture
def gateway_service():
    return FakeGatewayService()


@pytest.fixture
def fake_peer(gateway_service):
    return FakePeer(gateway_service)


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)
