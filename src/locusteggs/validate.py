# SPDX-License-Identifier: BSD-3-Clause

"""
Validate responses received by a Locust user.

What to check is described by a L{Validate} instance, which is usually
created using L{Validate.builder}::

    validate = (
        Validate.builder()
        .title("Home")
        .text("<h1>Welcome</h1>")
        .not_text("Page not found")
        .header_value("content-type", "text/html")
        .build()
    )

The actual checking is done by L{validate_page} or, for pages that a
browser would render, by L{validate_and_load_static_assets}. Both must be
given a response from a request made with C{catch_response=True}::

    with self.client.get("/", catch_response=True) as response:
        html = validate_and_load_static_assets(self, response, validate)

When a check fails, the response is marked as failed and
L{TransactionError<locusteggs.failure.TransactionError>} is raised,
which ends the current task.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from logging import getLogger
from typing import Any

from locusteggs.failure import requested_url, set_failure
from locusteggs.page import get_html_header, get_title, load_static_elements

_LOG = getLogger(__name__)


class Validate:
    """
    Describes the checks to perform on a response.

    Each check is stored together with a flag that tells whether the
    checked property should be present (C{True}) or absent (C{False}).
    """

    @staticmethod
    def builder() -> ValidateBuilder:
        """Return a builder for creating a L{Validate} instance."""
        return ValidateBuilder()

    @staticmethod
    def none() -> Validate:
        """Return a L{Validate} instance that does not check anything."""
        return Validate()

    def __init__(
        self,
        status: tuple[bool, int] | None = None,
        title: tuple[bool, str] | None = None,
        texts: Iterable[tuple[bool, str]] = (),
        headers: Iterable[tuple[bool, str, str]] = (),
        redirect: bool | None = None,
    ):
        self.status = status
        """C{(expected, code)}, or C{None} to accept any status code."""

        self.title = title
        """C{(expected, title)}, or C{None} to not check the title."""

        self.texts = tuple(texts)
        """C{(expected, text)*} snippets to look for in the body."""

        self.headers = tuple(headers)
        """
        C{(expected, name, value)*} headers to look for.
        An empty value only checks whether the header is set.
        """

        self.redirect = redirect
        """Whether the request should have been redirected, or C{None}
        to not check."""

    def __repr__(self) -> str:
        return (
            f"Validate(status={self.status!r}, title={self.title!r}, "
            f"texts={self.texts!r}, headers={self.headers!r}, "
            f"redirect={self.redirect!r})"
        )


class ValidateBuilder:
    """
    Collects checks for a L{Validate} instance.

    All methods return the builder itself, so calls can be chained.
    Status and title are single-valued: a later call replaces an earlier one.
    Texts and headers accumulate.
    """

    def __init__(self) -> None:
        self._status: tuple[bool, int] | None = None
        self._title: tuple[bool, str] | None = None
        self._texts: list[tuple[bool, str]] = []
        self._headers: list[tuple[bool, str, str]] = []
        self._redirect: bool | None = None

    def status(self, status: int) -> ValidateBuilder:
        """Require the response to have the given HTTP status code."""
        self._status = (True, status)
        return self

    def not_status(self, status: int) -> ValidateBuilder:
        """Require the response to have any status code except the given one."""
        self._status = (False, status)
        return self

    def title(self, title: str) -> ValidateBuilder:
        """
        Require the page title to contain the given text.
        The comparison is case-insensitive.
        """
        self._title = (True, title)
        return self

    def not_title(self, title: str) -> ValidateBuilder:
        """Require the page title to not contain the given text."""
        self._title = (False, title)
        return self

    def text(self, text: str) -> ValidateBuilder:
        """Require the body to contain the given text."""
        self._texts.append((True, text))
        return self

    def not_text(self, text: str) -> ValidateBuilder:
        """Require the body to not contain the given text."""
        self._texts.append((False, text))
        return self

    def texts(self, texts: Iterable[str]) -> ValidateBuilder:
        """Require the body to contain all of the given texts."""
        for text in texts:
            self.text(text)
        return self

    def not_texts(self, texts: Iterable[str]) -> ValidateBuilder:
        """Require the body to contain none of the given texts."""
        for text in texts:
            self.not_text(text)
        return self

    def header(self, name: str) -> ValidateBuilder:
        """Require the given header to be set."""
        self._headers.append((True, name, ""))
        return self

    def not_header(self, name: str) -> ValidateBuilder:
        """Require the given header to not be set."""
        self._headers.append((False, name, ""))
        return self

    def header_value(self, name: str, value: str) -> ValidateBuilder:
        """Require the given header to be set and contain C{value}."""
        self._headers.append((True, name, value))
        return self

    def not_header_value(self, name: str, value: str) -> ValidateBuilder:
        """Require the given header to not contain C{value}."""
        self._headers.append((False, name, value))
        return self

    def redirect(self, redirect: bool) -> ValidateBuilder:
        """Require the request to be redirected (C{True}) or not (C{False})."""
        self._redirect = redirect
        return self

    def build(self) -> Validate:
        """Create a L{Validate} instance containing the collected checks."""
        return Validate(
            self._status, self._title, self._texts, self._headers, self._redirect
        )


def valid_title(html: str, title: str) -> bool:
    """
    Return C{True} iff the title in the head of C{html} contains C{title}.

    The comparison is case-insensitive. A page without head or
    title is treated as having an empty title.
    """
    html_header = get_html_header(html) or ""
    html_title = get_title(html_header) or ""
    return title.lower() in html_title.lower()


def valid_text(html: str, text: str) -> bool:
    """Return C{True} iff C{html} contains C{text}, comparing case-sensitively."""
    return text in html


def header_is_set(headers: Mapping[str, str], name: str) -> bool:
    """
    Return C{True} iff the header called C{name} is set.

    The C{headers} mapping of a Locust response ignores case in its keys.
    """
    return name in headers


def valid_header_value(headers: Mapping[str, str], name: str, value: str) -> bool:
    """Return C{True} iff the header called C{name} is set and contains C{value}."""
    if not header_is_set(headers, name):
        _LOG.info("header (%s) not set", name)
        return False
    header_value = headers.get(name) or ""
    if value in header_value:
        return True
    _LOG.info('header does not contain expected value: "%s: %s"', name, header_value)
    return False


def _check_headers(
    response: Any, url: str, headers: Mapping[str, str], validate: Validate
) -> None:
    for expected, name, value in validate.headers:
        if not value:
            is_set = header_is_set(headers, name)
            if expected and not is_set:
                message = f"{url}: header not included in response: {name}"
            elif not expected and is_set:
                message = f"{url}: header was included in response: {name}"
            else:
                continue
        else:
            contains = valid_header_value(headers, name, value)
            if expected and not contains:
                message = (
                    f"{url}: header does not contain expected value: {name}: {value}"
                )
            elif not expected and contains:
                message = f"{url}: header contains unexpected value: {name}: {value}"
            else:
                continue
        set_failure(response, message, headers, response.text)


def _check_body(
    response: Any, url: str, headers: Mapping[str, str], html: str, validate: Validate
) -> None:
    if validate.title is not None:
        expected, title = validate.title
        found = valid_title(html, title)
        if expected and not found:
            set_failure(response, f"{url}: title not found: {title}", headers, html)
        if not expected and found:
            set_failure(response, f"{url}: title found: {title}", headers, html)

    for expected, text in validate.texts:
        found = valid_text(html, text)
        if expected and not found:
            set_failure(
                response, f"{url}: text not found on page: {text}", headers, html
            )
        if not expected and found:
            set_failure(response, f"{url}: text found on page: {text}", headers, html)


def validate_page(user: Any, response: Any, validate: Validate) -> str:
    """
    Check a response against a L{Validate} description.

    The checks are done in this order: redirect, status code, headers,
    title, texts. The first check that fails marks the response as failed.
    A response without status code, which Locust produces when the
    connection failed, always fails.

    @param user:
        The Locust user that made the request.
    @param response:
        Response from a request made with C{catch_response=True}.
    @param validate:
        The checks to perform.
    @return:
        The response body.
    @raise locusteggs.failure.TransactionError:
        If any of the checks failed.
    """
    url = requested_url(response)
    headers = response.headers

    if not response.status_code:
        # Locust reports connection errors as status code 0.
        error = getattr(response, "error", None)
        set_failure(response, f"{url}: no response from server: {error}")

    if validate.redirect is not None:
        redirected = bool(response.history)
        if redirected != validate.redirect:
            if validate.redirect:
                message = f"{url}: did not redirect"
            else:
                message = f"{url}: redirected unexpectedly"
            set_failure(response, message, headers, response.text)

    if validate.status is not None:
        expected, status = validate.status
        actual = response.status_code
        if expected and actual != status:
            set_failure(
                response,
                f"{url}: response status != {status}]: {actual}",
                headers,
                response.text,
            )
        if not expected and actual == status:
            set_failure(
                response,
                f"{url}: response status == {status}]: {actual}",
                headers,
                response.text,
            )
        if expected:
            # Otherwise Locust would count an expected error status as a failure.
            response.success()

    _check_headers(response, url, headers, validate)

    html: str = response.text
    _check_body(response, url, headers, html, validate)
    _LOG.debug("%s: validated for %s", url, user.__class__.__name__)
    return html


def validate_and_load_static_assets(user: Any, response: Any, validate: Validate) -> str:
    """
    Check a response like L{validate_page} does and then load the static
    assets referenced by the page, like a browser would.

    @return:
        The response body.
    @raise locusteggs.failure.TransactionError:
        If any of the checks failed.
    """
    html = validate_page(user, response, validate)
    load_static_elements(user, html)
    return html
