# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
import os
import random
import string

import pytest

from azure.storage.blob import BlobServiceClient

from azblobquickstart._client import AzBlobQuickstartContainerClient
from azblobquickstart._utils import QuickstartConfig, to_sdk_credential


def random_resource_name(name_length=8):
    return "".join(
        random.choices(string.ascii_lowercase + string.digits, k=name_length)
    )


@pytest.fixture(scope="package")
def config():
    if not os.environ.get("AZURE_STORAGE_ACCOUNT"):
        pytest.skip(
            '"AZURE_STORAGE_ACCOUNT" environment variable must be set to run end to end tests.'
        )
    return QuickstartConfig.from_environ()


@pytest.fixture(scope="package")
def sdk_container_client(config):
    blob_service_client = BlobServiceClient(
        config.account_url,
        credential=to_sdk_credential(config.account_url, config.get_credential()),
    )
    container = blob_service_client.get_container_client(random_resource_name())
    yield container
    container.close()


@pytest.fixture(scope="package")
def container_client(sdk_container_client, config):
    client = AzBlobQuickstartContainerClient(
        sdk_container_client, account_key=config.account_key, include_snapshots=True
    )
    assert client.create_container() is True
    yield client
    client.delete_container()
