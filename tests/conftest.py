import pytest


@pytest.fixture
def account_name():
    return "myaccount"


@pytest.fixture
def container_name():
    return "mycontainer"


@pytest.fixture
def blob_name():
    return "myblob"


@pytest.fixture
def account_url(account_name):
    return f"https://{account_name}.blob.core.windows.net"


@pytest.fixture
def container_url(account_url, container_name):
    return f"{account_url}/{container_name}"


@pytest.fixture
def blob_url(container_url, blob_name):
    return f"{container_url}/{blob_name}"


@pytest.fixture
def blob_content():
    return b"blob content"


@pytest.fixture
def blob_length(blob_content):
    return len(blob_content)
