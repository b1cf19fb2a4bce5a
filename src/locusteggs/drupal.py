# SPDX-License-Identifier: BSD-3-Clause

"""
Helpers that are specific to Drupal sites.

Drupal forms carry hidden C{form_build_id}, C{form_id} and often
C{form_token} values that must be posted back when submitting them.
The functions in this module extract those values from a page, either
from plain HTML or from the JSON-encoded AJAX commands that Drupal's
BigPipe module uses to stream deferred parts of a page.

L{log_in} and L{search} implement two complete interactions on top
of these helpers.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator
from logging import getLogger
from typing import Any

from lxml.html import HtmlElement, fragment_fromstring

from locusteggs.failure import set_failure
from locusteggs.validate import Validate, validate_and_load_static_assets

_LOG = getLogger(__name__)

ENV_USERNAME = "EGGS_USER"
"""Environment variable that overrides the user name used by L{log_in}."""

ENV_PASSWORD = "EGGS_PASS"
"""Environment variable that overrides the password used by L{log_in}."""

_ENCODED_QUOTE = "\\u0022"


def get_form(html: str, name: str) -> str:
    """
    Extract a form from a page.

    The form is identified by its C{data-drupal-selector} or C{id} attribute.
    See L{get_bigpipe_form} for forms served as BigPipe placeholders.

    @return:
        The contents of the form (without the C{<form>} tag itself),
        or an empty string if no such form was found.
    """
    # Lazy matching, so we stop at the end of the first matching form.
    pattern = rf'<form.*?(data-drupal-selector|id)="{re.escape(name)}".*?>(.*?)</form>'
    match = re.search(pattern, html.replace("\n", ""))
    if match is None:
        _LOG.warning("form %s not found", name)
        return ""
    return match.group(2)


def get_form_value(form_html: str, name: str) -> str:
    """
    Extract the value of a named form element.

    @return:
        The value of the element, or C{"none"} if no element with
        the given name and a C{value} attribute was found.
    """
    match = re.search(rf"name=\"{re.escape(name)}\" value=['\"](.*?)['\"]", form_html)
    if match is None:
        _LOG.warning("form element %s not found", name)
        return "none"
    return match.group(1)


def get_bigpipe_form(html: str, name: str) -> str:
    """
    Extract a form that is served as a BigPipe placeholder.

    BigPipe sends the form as part of an JSON-encoded AJAX command
    at the end of the page. Values in the returned fragment can be
    extracted with L{get_encoded_form_value}.

    @return:
        The encoded form fragment, or an empty string if no such
        form was found.
    """
    pattern = (
        re.escape("[{")
        + ".*?data-drupal-selector=.*?"
        + re.escape(name)
        + "(.*?)"
        + re.escape("}]")
    )
    match = re.search(pattern, html.replace("\n", ""))
    if match is None:
        _LOG.warning("bigpipe form %s not found", name)
        return ""
    return match.group(1)


def _decode_quotes(form_html: str) -> str:
    # Decoding quotes is enough for the plain form value pattern to match.
    return form_html.replace(_ENCODED_QUOTE, '"')


def get_encoded_form_value(form_html: str, name: str) -> str:
    """
    Extract the value of a named element from a JSON-encoded form,
    such as one returned by L{get_bigpipe_form}.

    @return:
        The value of the element, or C{"none"} if it was not found.
    """
    return get_form_value(_decode_quotes(form_html), name)


def get_updated_build_id(form_html: str, old_build_id: str) -> str:
    """
    Extract the new build ID from an C{update_build_id} AJAX command.

    Drupal sends this command when an AJAX request changes a form,
    to let the client replace C{old_build_id} before submitting.

    @return:
        The new build ID, or C{"none"} if no matching command was found.
    """
    pattern = (
        re.escape('{"command":"update_build_id","old":"')
        + re.escape(old_build_id)
        + re.escape('","new":"')
        + "(.*?)"
        + re.escape('"}')
    )
    match = re.search(pattern, form_html)
    if match is None:
        _LOG.warning("update_build_id not found")
        return "none"
    return match.group(1)


def get_form_values(form_html: str, names: Iterable[str]) -> dict[str, str]:
    """Extract the values of several form elements, mapped by name."""
    return {name: get_form_value(form_html, name) for name in names}


def get_encoded_form_values(form_html: str, names: Iterable[str]) -> dict[str, str]:
    """
    Extract the values of several elements of a JSON-encoded form,
    mapped by name.
    """
    decoded_form = _decode_quotes(form_html)
    return {name: get_form_value(decoded_form, name) for name in names}


def _parse_controls(nodes: Iterable[HtmlElement]) -> Iterator[tuple[HtmlElement, str]]:
    for node in nodes:
        attrib = node.attrib
        if "disabled" in attrib:
            # Disabled controls are not submitted.
            continue
        name = attrib.get("name")
        if not name:
            # Nameless controls cannot be submitted.
            continue
        yield node, name


def _control_value(node: HtmlElement) -> str | None:
    attrib = node.attrib
    if node.tag == "textarea":
        return node.text or ""
    if node.tag == "select":
        options = list(node.iter("option"))
        if not options:
            return None
        selected = [option for option in options if "selected" in option.attrib]
        option = (selected or options)[0]
        value = option.get("value")
        return (option.text or "").strip() if value is None else value

    ctype = attrib.get("type", "text").lower()
    if ctype in ("checkbox", "radio"):
        return attrib.get("value", "on") if "checked" in attrib else None
    if ctype in ("submit", "image", "button", "reset", "file"):
        # Buttons are submitted by choice; files need multipart encoding.
        return None
    return attrib.get("value", "")


def get_form_controls(form_html: str) -> dict[str, str]:
    """
    Collect the values that a browser would submit for a form,
    not counting its buttons.

    Unlike L{get_form_values}, this parses the form as HTML, so it also
    finds C{<textarea>} and C{<select>} contents and it does not need to
    know the element names in advance.

    @param form_html:
        Contents of a form, for example as returned by L{get_form}.
    @return:
        Element values mapped by name. If several elements share a name,
        the last one wins.
    """
    if not form_html.strip():
        return {}
    root = fragment_fromstring(form_html, create_parent="form")
    values: dict[str, str] = {}
    for node, name in _parse_controls(root.iter("input", "textarea", "select")):
        value = _control_value(node)
        if value is not None:
            values[name] = value
    return values


class Login:
    """Describes how to log in to a Drupal site; see L{log_in}."""

    def __init__(
        self,
        username: str = "username",
        password: str = "password",
        url: str = "/user/login",
        log_in_page_validation: Validate | None = None,
        logged_in_page_validation: Validate | None = None,
    ):
        """
        @param username:
            User name to log in with, unless overridden by the
            C{EGGS_USER} environment variable.
        @param password:
            Password to log in with, unless overridden by the
            C{EGGS_PASS} environment variable.
        @param url:
            Path of the log in form.
        @param log_in_page_validation:
            Checks for the page containing the log in form.
            By default only the presence of the form is checked.
        @param logged_in_page_validation:
            Checks for the page shown after logging in.
            By default the title must contain the user name.
        """
        self.username = username
        self.password = password
        self.url = url
        self.log_in_page_validation = log_in_page_validation
        self.logged_in_page_validation = logged_in_page_validation


def log_in(user: Any, login: Login | None = None) -> str:
    """
    Log in to a Drupal site using its standard log in form.

    @param user:
        The Locust user to log in; its session keeps the cookie.
    @param login:
        Log in parameters; the defaults of L{Login} are used if omitted.
    @return:
        The page shown after logging in.
    @raise locusteggs.failure.TransactionError:
        If any step of logging in failed.
    """
    if login is None:
        login = Login()
    username = os.environ.get(ENV_USERNAME, login.username)
    password = os.environ.get(ENV_PASSWORD, login.password)

    validate = login.log_in_page_validation
    if validate is None:
        validate = Validate.builder().text('<form class="user-login-form').build()

    with user.client.get(login.url, catch_response=True) as response:
        login_page = validate_and_load_static_assets(user, response, validate)

        # A page can contain multiple forms.
        login_form = get_form(login_page, "user-login-form")
        if not login_form:
            set_failure(
                response, f"{login.url}: no user-login-form on page", html=login_page
            )
        # A missing element is reported as "none".
        form_build_id = get_form_value(login_form, "form_build_id")
        if form_build_id in ("", "none"):
            set_failure(
                response, f"{login.url}: no form_build_id on page", html=login_form
            )
        form_id = get_form_value(login_form, "form_id")
        if form_id in ("", "none"):
            set_failure(response, f"{login.url}: no form_id on page", html=login_form)

    validate = login.logged_in_page_validation
    if validate is None:
        validate = Validate.builder().title(username).build()

    params = {
        "name": username,
        "pass": password,
        "form_build_id": form_build_id,
        "form_id": form_id,
        "op": "Log in",
    }
    _LOG.info("Logging in as %s", username)
    with user.client.post(login.url, data=params, catch_response=True) as response:
        # A successful log in is redirected.
        if not response.history:
            set_failure(
                response,
                f"{response.url}: login failed "
                f"(check `{ENV_USERNAME}` and `{ENV_PASSWORD}`)",
                response.headers,
                response.text,
            )
        return validate_and_load_static_assets(user, response, validate)


class SearchParams:
    """Describes a search on a Drupal site; see L{search}."""

    def __init__(
        self,
        keys: str = "",
        url: str = "/search",
        form_values: Iterable[str] = ("form_build_id", "form_id"),
        search_page_validation: Validate | None = None,
        submit: str = "Search",
        results_page_validation: Validate | None = None,
    ):
        """
        @param keys:
            The word or words to search for.
        @param url:
            Path of the search form.
        @param form_values:
            Names of the form values to scrape from the search form and
            post back. The default works for Drupal 8 and later.
        @param search_page_validation:
            Checks for the page containing the search form.
        @param submit:
            Value of the C{op} field, which is the label
            of the search button.
        @param results_page_validation:
            Checks for the search results page.
        """
        self.keys = keys
        self.url = url
        self.form_values = tuple(form_values)
        self.search_page_validation = search_page_validation
        self.submit = submit
        self.results_page_validation = results_page_validation


def search(user: Any, params: SearchParams | None = None) -> str:
    """
    Load the search form of a Drupal site and submit a search.

    @return:
        The search results page.
    @raise locusteggs.failure.TransactionError:
        If validation of the search or results page failed.
    """
    if params is None:
        params = SearchParams()
    no_validation = Validate.none()

    with user.client.get(params.url, catch_response=True) as response:
        search_page = validate_and_load_static_assets(
            user, response, params.search_page_validation or no_validation
        )

    search_form = get_form(search_page, "search-form")
    data = {"keys": params.keys, "op": params.submit}
    data.update(get_form_values(search_form, params.form_values))

    with user.client.post(params.url, data=data, catch_response=True) as response:
        return validate_and_load_static_assets(
            user, response, params.results_page_validation or no_validation
        )
