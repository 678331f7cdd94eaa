# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------

import datetime
import logging
from typing import Optional

import azure.core.exceptions
import azure.storage.blob
from typing_extensions import Self

from azblobquickstart import _utils
from azblobquickstart._version import __version__
from azblobquickstart.exceptions import MalformedPageError, TransportError
from azblobquickstart.pager import BlobEntry, Page


_LOGGER = logging.getLogger(__name__)


class AzBlobQuickstartContainerClient:
    _MAX_BLOCK_SIZE = 8 * 1024 * 1024
    _DEFAULT_DOWNLOAD_LENGTH = 4 * 1024 * 1024
    _DEFAULT_SAS_EXPIRY = datetime.timedelta(days=2)
    _USER_AGENT = f"azblobquickstart/{__version__}"

    def __init__(
        self,
        sdk_container_client: azure.storage.blob.ContainerClient,
        account_key: Optional[str] = None,
        include_snapshots: bool = False,
    ):
        self._sdk_container_client = sdk_container_client
        self._account_key = account_key
        self._include_snapshots = include_snapshots

    @classmethod
    def from_container_url(
        cls,
        container_url: str,
        credential: _utils.AZBLOBQUICKSTART_CREDENTIAL_TYPE = None,
        account_key: Optional[str] = None,
        include_snapshots: bool = False,
    ) -> Self:
        sdk_container_client = azure.storage.blob.ContainerClient.from_container_url(
            container_url,
            credential=_utils.to_sdk_credential(container_url, credential),
            max_block_size=cls._MAX_BLOCK_SIZE,
            user_agent=cls._USER_AGENT,
        )
        return cls(
            sdk_container_client,
            account_key=account_key,
            include_snapshots=include_snapshots,
        )

    @property
    def url(self) -> str:
        return self._sdk_container_client.url

    @property
    def account_name(self) -> str:
        return self._sdk_container_client.account_name

    @property
    def container_name(self) -> str:
        return self._sdk_container_client.container_name

    def fetch_page(
        self, continuation_token: Optional[str], max_results: int
    ) -> Page:
        include = ["snapshots"] if self._include_snapshots else None
        try:
            sdk_pages = self._sdk_container_client.list_blobs(
                include=include, results_per_page=max_results
            ).by_page(continuation_token=continuation_token)
            sdk_page = next(sdk_pages, None)
            if sdk_page is None:
                raise MalformedPageError("service returned no page of results")
            items = tuple(self._to_blob_entry(blob) for blob in sdk_page)
        except azure.core.exceptions.AzureError as e:
            raise TransportError(e) from e
        # The service reports the final page with an empty next marker.
        continuation = sdk_pages.continuation_token or None
        return Page(items=items, continuation=continuation)

    def create_container(self) -> bool:
        try:
            self._sdk_container_client.create_container()
        except azure.core.exceptions.ResourceExistsError:
            _LOGGER.debug(
                "Container %s already exists. Skipping creation.", self.container_name
            )
            return False
        _LOGGER.debug("Created container %s.", self.container_name)
        return True

    def delete_container(self) -> None:
        self._sdk_container_client.delete_container()
        _LOGGER.debug("Deleted container %s.", self.container_name)

    def upload_file(self, blob_name: str, path: str) -> None:
        with open(path, "rb") as f:
            self._sdk_container_client.upload_blob(blob_name, f, overwrite=True)
        _LOGGER.debug("Uploaded %s to blob %s.", path, blob_name)

    def download_blob(
        self, blob_name: str, path: str, length: Optional[int] = None
    ) -> str:
        if length is None:
            length = self._DEFAULT_DOWNLOAD_LENGTH
        downloader = self._sdk_container_client.download_blob(
            blob_name, offset=0, length=length
        )
        with open(path, "wb") as f:
            downloader.readinto(f)
        _LOGGER.debug("Downloaded blob %s to %s.", blob_name, path)
        return path

    def delete_blob(self, blob_name: str) -> None:
        self._sdk_container_client.delete_blob(blob_name)
        _LOGGER.debug("Deleted blob %s.", blob_name)

    def generate_sas_url(
        self, blob_name: str, expiry: Optional[datetime.timedelta] = None
    ) -> str:
        if expiry is None:
            expiry = self._DEFAULT_SAS_EXPIRY
        start = datetime.datetime.now(datetime.timezone.utc)
        sas_kwargs = {}
        if self._account_key is not None:
            sas_kwargs["account_key"] = self._account_key
        else:
            sas_kwargs["user_delegation_key"] = self._get_user_delegation_key(
                start, start + expiry
            )
        sas_token = azure.storage.blob.generate_blob_sas(
            account_name=self.account_name,
            container_name=self.container_name,
            blob_name=blob_name,
            permission=azure.storage.blob.BlobSasPermissions(read=True, add=True),
            expiry=start + expiry,
            protocol="https",
            **sas_kwargs,
        )
        blob_url = self._sdk_container_client.get_blob_client(blob_name).url
        return f"{blob_url}?{sas_token}"

    def close(self) -> None:
        self._sdk_container_client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _get_user_delegation_key(
        self, start: datetime.datetime, expiry: datetime.datetime
    ) -> azure.storage.blob.UserDelegationKey:
        service_client = azure.storage.blob.BlobServiceClient(
            self._get_account_url(),
            credential=self._sdk_container_client.credential,
        )
        with service_client:
            return service_client.get_user_delegation_key(start, expiry)

    def _get_account_url(self) -> str:
        return f"{self._sdk_container_client.scheme}://{self._sdk_container_client.primary_hostname}"

    def _to_blob_entry(self, blob: azure.storage.blob.BlobProperties) -> BlobEntry:
        if not getattr(blob, "name", None):
            raise MalformedPageError(f"listed blob has no name: {blob!r}")
        return BlobEntry(name=blob.name, snapshot_id=blob.snapshot or None)

