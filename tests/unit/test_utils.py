# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
from unittest import mock

import pytest

from azure.core.credentials import AzureNamedKeyCredential, AzureSasCredential
from azure.identity import DefaultAzureCredential

from azblobquickstart._utils import (
    QuickstartConfig,
    parse_page_size,
    to_sdk_credential,
)
from azblobquickstart.exceptions import ConfigurationError


@pytest.fixture
def mock_default_azure_credential():
    with mock.patch(
        "azblobquickstart._utils.DefaultAzureCredential", spec=True
    ) as patched_credential_cls:
        yield patched_credential_cls


class TestQuickstartConfig:
    def test_from_environ_defaults(self, account_name):
        config = QuickstartConfig.from_environ({"AZURE_STORAGE_ACCOUNT": account_name})
        assert config == QuickstartConfig(
            account_name=account_name,
            account_key=None,
            container_name="quickstart",
            page_size=10,
        )

    def test_from_environ_all_settings(self, account_name):
        config = QuickstartConfig.from_environ(
            {
                "AZURE_STORAGE_ACCOUNT": account_name,
                "AZURE_STORAGE_ACCESS_KEY": "key",
                "AZURE_STORAGE_CONTAINER": "other",
                "AZBLOBQUICKSTART_PAGE_SIZE": "50",
            }
        )
        assert config == QuickstartConfig(
            account_name=account_name,
            account_key="key",
            container_name="other",
            page_size=50,
        )

    def test_from_environ_reads_os_environ(self, monkeypatch, account_name):
        monkeypatch.setenv("AZURE_STORAGE_ACCOUNT", account_name)
        monkeypatch.delenv("AZURE_STORAGE_ACCESS_KEY", raising=False)
        monkeypatch.delenv("AZURE_STORAGE_CONTAINER", raising=False)
        monkeypatch.delenv("AZBLOBQUICKSTART_PAGE_SIZE", raising=False)
        assert QuickstartConfig.from_environ().account_name == account_name

    @pytest.mark.parametrize("environ", [{}, {"AZURE_STORAGE_ACCOUNT": ""}])
    def test_from_environ_requires_account(self, environ):
        with pytest.raises(ConfigurationError, match="AZURE_STORAGE_ACCOUNT"):
            QuickstartConfig.from_environ(environ)

    @pytest.mark.parametrize(
        "page_size,expected_message",
        [
            ("ten", "must be an integer"),
            ("1.5", "must be an integer"),
            ("0", "must be at least 1"),
            ("-3", "must be at least 1"),
        ],
    )
    def test_from_environ_invalid_page_size(
        self, account_name, page_size, expected_message
    ):
        with pytest.raises(ConfigurationError, match=expected_message):
            QuickstartConfig.from_environ(
                {
                    "AZURE_STORAGE_ACCOUNT": account_name,
                    "AZBLOBQUICKSTART_PAGE_SIZE": page_size,
                }
            )

    def test_urls(self, account_name, account_url, container_url):
        config = QuickstartConfig(account_name=account_name, container_name="mycontainer")
        assert config.account_url == account_url
        assert config.container_url == container_url

    def test_credential_with_account_key(self, account_name):
        config = QuickstartConfig(account_name=account_name, account_key="key")
        credential = config.get_credential()
        assert isinstance(credential, AzureNamedKeyCredential)
        assert credential.named_key.name == account_name
        assert credential.named_key.key == "key"

    def test_credential_without_account_key(self, account_name):
        assert QuickstartConfig(account_name=account_name).get_credential() is None


class TestToSdkCredential:
    def test_none_uses_default_azure_credential(
        self, container_url, mock_default_azure_credential
    ):
        assert (
            to_sdk_credential(container_url, None)
            is mock_default_azure_credential.return_value
        )

    def test_false_is_anonymous(self, container_url):
        assert to_sdk_credential(container_url, False) is None

    def test_url_with_sas_token_is_anonymous(self, container_url):
        credential = AzureSasCredential("sas")
        assert to_sdk_credential(f"{container_url}?sv=2024&sig=abc", credential) is None

    @pytest.mark.parametrize(
        "credential",
        [
            AzureSasCredential("sas"),
            AzureNamedKeyCredential("name", "key"),
            mock.Mock(DefaultAzureCredential),
        ],
    )
    def test_supported_credentials_pass_through(self, container_url, credential):
        assert to_sdk_credential(container_url, credential) is credential

    @pytest.mark.parametrize("credential", ["account-key", 1, object()])
    def test_unsupported_credential(self, container_url, credential):
        with pytest.raises(TypeError, match="Unsupported credential"):
            to_sdk_credential(container_url, credential)


class TestParsePageSize:
    @pytest.mark.parametrize("value,expected", [("1", 1), ("10", 10), (" 25 ", 25)])
    def test_valid(self, value, expected):
        assert parse_page_size(value) == expected

    @pytest.mark.parametrize(
        "value,expected_message",
        [
            ("ten", "must be an integer, not: 'ten'"),
            ("", "must be an integer"),
            ("0", "must be at least 1, not: 0"),
            ("-5", "must be at least 1, not: -5"),
        ],
    )
    def test_invalid(self, value, expected_message):
        with pytest.raises(ValueError, match=expected_message):
            parse_page_size(value)

    def test_environ_error_names_variable(self, account_name):
        # Same validation as --page-size, reported as a configuration error.
        with pytest.raises(
            ConfigurationError,
            match='"AZBLOBQUICKSTART_PAGE_SIZE" must be at least 1, not: 0',
        ):
            QuickstartConfig.from_environ(
                {
                    "AZURE_STORAGE_ACCOUNT": account_name,
                    "AZBLOBQUICKSTART_PAGE_SIZE": "0",
                }
            )
