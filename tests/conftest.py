import pytest

from scanpoints import create_service


@pytest.fixture(scope="session")
def service():
    return create_service(sources=[])
