# SPDX-License-Identifier: BSD-3-Clause

"""
Scrape bits of information out of HTML pages.

These helpers use regular expressions rather than a full parser: load tests
parse every page they fetch, and only need a few well-known fragments.
Newlines are removed before matching multi-line constructs such as
the document head.
"""

from __future__ import annotations

import re
from html import unescape
from logging import getLogger
from typing import Any

_LOG = getLogger(__name__)

_RE_HEAD = re.compile(r"<head(.*?)</head>")
_RE_TITLE = re.compile(r"<title>(.*?)</title>")


def get_html_header(html: str) -> str | None:
    """
    Return the entire C{<head>} element of the given page,
    or C{None} if there is none.
    """
    match = _RE_HEAD.search(html.replace("\n", ""))
    return None if match is None else match.group(0)


def get_title(html: str) -> str | None:
    """
    Return the contents of the C{<title>} element of the given page,
    or C{None} if there is none.
    """
    match = _RE_TITLE.search(html.replace("\n", ""))
    return None if match is None else match.group(1)


def base_url_of(user: Any) -> str:
    """Return the host of a Locust user as a base URL ending in a slash."""
    host = user.host or ""
    return host if host.endswith("/") else host + "/"


def _local_urls(pattern: str, html: str) -> list[str]:
    return [unescape(match.group(1)) for match in re.finditer(pattern, html)]


def get_src_elements(html: str, base_url: str) -> list[str]:
    """
    Find the URLs of local images and scripts.

    @param html:
        Page to scan for C{src} attributes.
    @param base_url:
        URLs starting with this base URL are considered local,
        as are all absolute paths.
    @return:
        The C{src} attribute values, with HTML character references decoded.
    """
    return _local_urls(rf'(?i)src="(({re.escape(base_url)}|/).*?)"', html)


def get_css_elements(html: str, base_url: str) -> list[str]:
    """
    Find the URLs of local style sheets.

    @param html:
        Page to scan for C{href} attributes.
    @param base_url:
        URLs starting with this base URL are considered local,
        as are all absolute paths.
    @return:
        The C{href} attribute values that refer to CSS files,
        with HTML character references decoded.
    """
    return _local_urls(rf'(?i)href="(({re.escape(base_url)}|/).*?\.css.*?)"', html)


def load_static_elements(user: Any, html: str) -> None:
    """
    Request all local static assets referenced by a page,
    the way a browser would after loading it.

    All requests are grouped under the name C{"static asset"}
    in the Locust statistics.
    """
    base_url = base_url_of(user)
    urls = get_src_elements(html, base_url) + get_css_elements(html, base_url)
    _LOG.debug("Loading %d static assets", len(urls))
    for url in urls:
        user.client.get(url, name="static asset")
