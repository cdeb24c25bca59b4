import pytest

from scim_provision.console import Console
from scim_provision.http_client import SCIMClient
from tests.mock_scim_server import MockSCIMServer


@pytest.fixture
def server():
    with MockSCIMServer() as s:
        yield s


@pytest.fixture
def client(server):
    return SCIMClient(server.base_url)


@pytest.fixture
def console():
    return Console()
