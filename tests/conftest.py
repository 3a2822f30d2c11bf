"""
Shared fixtures for the service-watch test suite.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.models import HttpSpec, RpcSpec, ServiceConfig


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def http_client():
    """Transport double. Every call is an AsyncMock the test configures."""
    client = MagicMock()
    client.request = AsyncMock(return_value="OK")
    client.get = AsyncMock(return_value={})
    client.post = AsyncMock(return_value={})
    client.request_rpc = AsyncMock(return_value="0x0")
    return client


@pytest.fixture
def http_spec():
    return HttpSpec(uri="http://localhost:3000/health")


@pytest.fixture
def rpc_spec():
    return RpcSpec(uri="http://localhost:8545", method="eth_blockNumber", chain="eth")


@pytest.fixture
def pm2_config(http_spec):
    return ServiceConfig(instance_type="pm2", http=http_spec)


DF_OUTPUT = """Filesystem      Size  Used Avail Use% Mounted on
udev            3.9G     0  3.9G   0% /dev
tmpfs           797M  1.6M  795M   1% /run
/dev/sda1        97G   89G  8.0G  92% /
/dev/loop0       56M   28M   28M  50% /snap/core18/2128
/dev/sdb         20G  5.0G   15G  25% /data
"""


@pytest.fixture
def df_output():
    return DF_OUTPUT
