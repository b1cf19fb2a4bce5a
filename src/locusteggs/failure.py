# SPDX-License-Identifier: BSD-3-Clause

"""
Report failed validations to Locust.

A Locust task that makes a request with C{catch_response=True} gets a
response object on which it can call C{failure()}. L{set_failure} does that,
logs what it can about the response and then raises L{TransactionError}
to abort the rest of the task.
"""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import Any, NoReturn

from locust.exception import RescheduleTask

_LOG = getLogger(__name__)


class TransactionError(RescheduleTask):
    """
    Raised after a failure has been recorded on a response.

    Locust treats this as a request to move on to the next task,
    so the failure is counted once in the request statistics
    and no traceback is logged.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        """Description of the failed check."""


def requested_url(response: Any) -> str:
    """
    Return the URL that was requested originally.

    When the request was redirected, C{response.url} holds the final URL;
    the first entry of C{response.history} holds the original one.
    A response to a request that never reached the server may not know
    its URL; then an empty string is returned.
    """
    history = getattr(response, "history", None)
    if history:
        return str(history[0].url)
    request = getattr(response, "request", None)
    if request is not None and request.url is not None:
        return str(request.url)
    url = getattr(response, "url", None)
    return "" if url is None else str(url)


def set_failure(
    response: Any,
    message: str,
    headers: Mapping[str, str] | None = None,
    html: str | None = None,
) -> NoReturn:
    """
    Mark C{response} as failed and abort the current task.

    @param response:
        Response from a request made with C{catch_response=True}.
    @param message:
        Description of the failure; this is what Locust shows
        in its failure statistics.
    @param headers:
        Response headers to include in the debug log, if any.
    @param html:
        Response body to include in the debug log, if any.
    @raise TransactionError:
        Always.
    """
    _LOG.warning("%s", message)
    if headers is not None:
        _LOG.debug("Response headers for failure: %s", dict(headers))
    if html is not None:
        _LOG.debug("Response body for failure: %s", html)
    response.failure(message)
    raise TransactionError(message)
