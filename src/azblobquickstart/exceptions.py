# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------


class AzBlobQuickstartError(Exception):
    """Base class for exceptions raised by azblobquickstart."""

    pass


class TransportError(AzBlobQuickstartError):
    """Raised when a request to the Blob service fails while listing a page.

    This covers both network failures and errors returned by the service (e.g.
    authorization failures). The exception that caused the failure is available
    as ``underlying_exception``. When raised from a blob listing, no further
    pages are requested and the listing cannot be resumed from where it failed.
    """

    _MSG_FORMAT = (
        "Request to the Blob service failed while listing blobs. "
        "Encountered exception:\n{underlying_exception}"
    )

    def __init__(self, underlying_exception: BaseException):
        super().__init__(
            self._MSG_FORMAT.format(underlying_exception=underlying_exception)
        )
        self.underlying_exception = underlying_exception


class MalformedPageError(AzBlobQuickstartError):
    """Raised when a listed page does not have the expected shape."""

    def __init__(self, reason: str):
        super().__init__(f"Received malformed page of blobs: {reason}")
        self.reason = reason


class ConfigurationError(AzBlobQuickstartError):
    """Raised when required quickstart settings are missing or invalid."""

    pass
