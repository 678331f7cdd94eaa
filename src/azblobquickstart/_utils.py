# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
import dataclasses
import os
from collections.abc import Mapping
from typing import Optional, Union, Literal
import urllib.parse

from azure.identity import DefaultAzureCredential
from azure.core.credentials import (
    AzureNamedKeyCredential,
    AzureSasCredential,
    TokenCredential,
)
from typing_extensions import Self

from azblobquickstart.exceptions import ConfigurationError
from azblobquickstart.pager import DEFAULT_PAGE_SIZE


SDK_CREDENTIAL_TYPE = Optional[
    Union[
        AzureNamedKeyCredential,
        AzureSasCredential,
        TokenCredential,
    ]
]
AZBLOBQUICKSTART_CREDENTIAL_TYPE = Union[SDK_CREDENTIAL_TYPE, Literal[False]]

ACCOUNT_ENV_VAR = "AZURE_STORAGE_ACCOUNT"
ACCESS_KEY_ENV_VAR = "AZURE_STORAGE_ACCESS_KEY"
CONTAINER_ENV_VAR = "AZURE_STORAGE_CONTAINER"
PAGE_SIZE_ENV_VAR = "AZBLOBQUICKSTART_PAGE_SIZE"
DEFAULT_CONTAINER_NAME = "quickstart"


@dataclasses.dataclass(frozen=True)
class QuickstartConfig:
    account_name: str
    account_key: Optional[str] = None
    container_name: str = DEFAULT_CONTAINER_NAME
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        if environ is None:
            environ = os.environ
        account_name = environ.get(ACCOUNT_ENV_VAR)
        if not account_name:
            raise ConfigurationError(
                f'"{ACCOUNT_ENV_VAR}" environment variable must be set to run the quickstart.'
            )
        return cls(
            account_name=account_name,
            account_key=environ.get(ACCESS_KEY_ENV_VAR) or None,
            container_name=environ.get(CONTAINER_ENV_VAR) or DEFAULT_CONTAINER_NAME,
            page_size=_page_size_from_environ(environ.get(PAGE_SIZE_ENV_VAR)),
        )

    @property
    def account_url(self) -> str:
        return f"https://{self.account_name}.blob.core.windows.net"

    @property
    def container_url(self) -> str:
        return f"{self.account_url}/{self.container_name}"

    def get_credential(self) -> AZBLOBQUICKSTART_CREDENTIAL_TYPE:
        if self.account_key is not None:
            return AzureNamedKeyCredential(self.account_name, self.account_key)
        return None


def to_sdk_credential(
    resource_url: str, credential: AZBLOBQUICKSTART_CREDENTIAL_TYPE
) -> SDK_CREDENTIAL_TYPE:
    if credential is False or _url_has_sas_token(resource_url):
        return None
    if credential is None:
        return DefaultAzureCredential()
    if isinstance(
        credential, (AzureNamedKeyCredential, AzureSasCredential, TokenCredential)
    ):
        return credential
    raise TypeError(f"Unsupported credential: {type(credential)}")


def parse_page_size(value: str) -> int:
    try:
        page_size = int(value)
    except ValueError:
        raise ValueError(f"must be an integer, not: {value!r}") from None
    if page_size < 1:
        raise ValueError(f"must be at least 1, not: {page_size}")
    return page_size


def _page_size_from_environ(value: Optional[str]) -> int:
    if value is None or value == "":
        return DEFAULT_PAGE_SIZE
    try:
        return parse_page_size(value)
    except ValueError as e:
        raise ConfigurationError(f'"{PAGE_SIZE_ENV_VAR}" {e}') from None


def _url_has_sas_token(resource_url: str) -> bool:
    parsed_url = urllib.parse.urlparse(resource_url)
    if parsed_url.query is None:
        return False
    parsed_qs = urllib.parse.parse_qs(parsed_url.query)
    # The signature is always required in a valid SAS token. So look for the "sig"
    # key to determine if the URL has a SAS token.
    return "sig" in parsed_qs
