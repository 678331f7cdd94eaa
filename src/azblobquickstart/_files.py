# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import os
import tempfile
import zipfile
from collections.abc import Iterable
from typing import Optional

_LOGGER = logging.getLogger(__name__)

SAMPLE_FILE_CONTENT = "Hello Azure!"
SAMPLE_ARCHIVE_MEMBERS = ("test1", "test2")


def create_sample_file(
    directory: Optional[str] = None,
    prefix: str = "sample",
    suffix: str = ".txt",
    content: str = SAMPLE_FILE_CONTENT,
) -> str:
    fd, path = tempfile.mkstemp(suffix=suffix, prefix=prefix, dir=directory)
    with os.fdopen(fd, "w") as f:
        f.write(content)
    _LOGGER.debug("Created sample file at %s.", path)
    return path


def create_sample_archive(
    path: str, member_names: Iterable[str] = SAMPLE_ARCHIVE_MEMBERS
) -> str:
    directory = os.path.dirname(os.path.abspath(path))
    with zipfile.ZipFile(path, "w") as archive:
        for member_name in member_names:
            sample_file = create_sample_file(directory, prefix=member_name)
            try:
                archive.write(sample_file, arcname=os.path.basename(sample_file))
            finally:
                os.remove(sample_file)
    _LOGGER.debug("Created sample archive at %s.", path)
    return path
