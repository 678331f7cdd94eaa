# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
"""Azure Blob Storage quickstart.

Creates a container and a sample archive, then reads commands from stdin:

    (P)utBlob | (L)istBlobs | (G)etBlob | (D)eleteBlobs | (E)xitSample

The storage account is read from the AZURE_STORAGE_ACCOUNT environment
variable. Set AZURE_STORAGE_ACCESS_KEY to authenticate with a shared key,
otherwise DefaultAzureCredential is used.
"""

import argparse
import dataclasses
import logging
import os
import shutil
import sys
import tempfile
from collections.abc import Callable
from typing import Dict, Optional, List, TextIO

import azure.core.exceptions

from azblobquickstart._client import AzBlobQuickstartContainerClient
from azblobquickstart._files import create_sample_archive
from azblobquickstart._utils import QuickstartConfig, parse_page_size
from azblobquickstart.exceptions import ConfigurationError, TransportError
from azblobquickstart.pager import BlobPager

_LOGGER = logging.getLogger(__name__)

SAMPLE_BLOB_NAME = "SampleArchive.zip"
MENU = "(P)utBlob | (L)istBlobs | (G)etBlob | (D)eleteBlobs | (E)xitSample"
PROMPT = "# Enter a command : "


class Quickstart:
    def __init__(
        self,
        client: AzBlobQuickstartContainerClient,
        pager: BlobPager,
        archive_path: str,
        download_path: str,
        blob_name: str = SAMPLE_BLOB_NAME,
    ):
        self._client = client
        self._pager = pager
        self._archive_path = archive_path
        self._download_path = download_path
        self._blob_name = blob_name
        self._commands: Dict[str, Callable[[], None]] = {
            "P": self.put_blob,
            "L": self.list_blobs,
            "G": self.get_blob,
            "D": self.delete_blob,
        }

    def run(self, input_stream: TextIO) -> int:
        print("Enter a command")
        print(MENU)
        while True:
            print(PROMPT)
            line = input_stream.readline()
            if not line:
                _LOGGER.debug("Reached end of input. Exiting without cleanup.")
                return 0
            command = line.strip()
            if command == "E":
                return self._run_command(self.exit_sample)
            handler = self._commands.get(command)
            if handler is None:
                continue
            self._run_command(handler)

    def put_blob(self) -> None:
        print(f"Uploading the sample file into the container: {self._client.url}")
        self._client.upload_file(self._blob_name, self._archive_path)
        print("Completed upload request.")
        print(f"SAS Url: {self._client.generate_sas_url(self._blob_name)}")

    def list_blobs(self) -> None:
        print(f"Listing blobs in the container: {self._client.url}")
        for page in self._pager.iter_pages():
            if not page.items:
                print("There are no more blobs to list off.")
            for entry in page.items:
                output = f"Blob name: {entry.name}"
                if entry.snapshot_id is not None:
                    output += f", Snapshot: {entry.snapshot_id}"
                print(output)
        print("Completed list blobs request.")

    def get_blob(self) -> None:
        print(f"Get the blob: {self._blob_name}")
        path = self._client.download_blob(self._blob_name, self._download_path)
        print(f"The blob was downloaded to {os.path.abspath(path)}")

    def delete_blob(self) -> None:
        print(f"Delete the blob: {self._blob_name}")
        self._client.delete_blob(self._blob_name)
        print(f">> Blob deleted: {self._blob_name}")
        print()

    def exit_sample(self) -> None:
        print("Cleaning up the sample and exiting!")
        self._client.delete_container()
        for path in (self._archive_path, self._download_path):
            if os.path.exists(path):
                os.remove(path)

    def _run_command(self, handler: Callable[[], None]) -> int:
        try:
            handler()
        except (azure.core.exceptions.AzureError, TransportError) as e:
            _LOGGER.debug("Command failed.", exc_info=True)
            print(describe_service_error(e))
            return 1
        return 0


def describe_service_error(error: Exception) -> str:
    if isinstance(error, TransportError):
        error = error.underlying_exception
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        return f"Service error returned: {status_code}"
    return f"Service request failed: {error}"


def page_size_arg(value: str) -> int:
    try:
        return parse_page_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(usage=__doc__)
    parser.add_argument(
        "--container",
        help="Name of the container to create and use. Overrides AZURE_STORAGE_CONTAINER.",
    )
    parser.add_argument(
        "--page-size",
        type=page_size_arg,
        help="Maximum number of blobs to request per listing page. Overrides AZBLOBQUICKSTART_PAGE_SIZE.",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Turn on debug logging."
    )
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> QuickstartConfig:
    config = QuickstartConfig.from_environ()
    overrides = {}
    if args.container:
        overrides["container_name"] = args.container
    if args.page_size is not None:
        overrides["page_size"] = args.page_size
    return dataclasses.replace(config, **overrides)


def create_container(client: AzBlobQuickstartContainerClient) -> None:
    if client.create_container():
        print(f"Created container: {client.container_name}")
    else:
        print(f"{client.container_name} container already exists, resuming...")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    try:
        config = load_config(args)
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        return 1

    client = AzBlobQuickstartContainerClient.from_container_url(
        config.container_url,
        config.get_credential(),
        account_key=config.account_key,
        include_snapshots=True,
    )
    work_dir = tempfile.mkdtemp(prefix="azblobquickstart-")
    try:
        with client:
            try:
                create_container(client)
            except azure.core.exceptions.AzureError as e:
                print(describe_service_error(e))
                return 1
            archive_path = create_sample_archive(
                os.path.join(work_dir, SAMPLE_BLOB_NAME)
            )
            print(f">> Created a sample archive at: {archive_path}")
            quickstart = Quickstart(
                client,
                BlobPager(client, page_size=config.page_size),
                archive_path=archive_path,
                download_path=os.path.join(work_dir, "downloadedFile.zip"),
            )
            return quickstart.run(sys.stdin)
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)


if __name__ == "__main__":
    sys.exit(main())
