# SPDX-License-Identifier: BSD-3-Clause

"""
Load test for a Drupal site installed with the Umami demo profile.

Run it with for example::

    locust -f examples/umami/locustfile.py --host https://umami.example.com

Most users browse anonymously in English or Spanish; a few log in as
administrator and edit articles. Pass C{--admin-username} and
C{--admin-password} (or set C{ADMIN_USERNAME} and C{ADMIN_PASSWORD})
to match the site's administrator account.
"""

from __future__ import annotations

from logging import getLogger

from locust import HttpUser, between, events
from locust.exception import StopUser

from locusteggs.failure import TransactionError
from locusteggs.version import VERSION_STRING

import admin
import english
import spanish

_LOG = getLogger(__name__)


@events.init_command_line_parser.add_listener
def _add_arguments(parser):
    parser.add_argument(
        "--admin-username",
        type=str,
        env_var="ADMIN_USERNAME",
        default=admin.DEFAULT_USERNAME,
        help="user name of the site administrator",
    )
    parser.add_argument(
        "--admin-password",
        type=str,
        env_var="ADMIN_PASSWORD",
        default=admin.DEFAULT_PASSWORD,
        is_secret=True,
        help="password of the site administrator",
    )


@events.test_start.add_listener
def _announce(environment, **kwargs):
    _LOG.info(
        "Umami load test against %s, using locust-eggs %s",
        environment.host,
        VERSION_STRING,
    )


class AnonymousEnglishUser(HttpUser):
    """Browses the English pages without logging in."""

    weight = 40
    wait_time = between(0, 3)
    tasks = {
        english.front_page_en: 2,
        english.basic_page_en: 1,
        english.article_listing_en: 1,
        english.article_en: 2,
        english.recipe_listing_en: 1,
        english.recipe_en: 4,
        english.page_by_nid: 1,
        english.term_listing_en: 2,
        english.search_en: 1,
        english.anonymous_contact_form_en: 1,
    }


class AnonymousSpanishUser(HttpUser):
    """Browses the Spanish pages without logging in."""

    weight = 9
    wait_time = between(0, 3)
    tasks = {
        spanish.front_page_es: 2,
        spanish.basic_page_es: 1,
        spanish.article_listing_es: 1,
        spanish.article_es: 2,
        spanish.recipe_listing_es: 1,
        spanish.recipe_es: 4,
        spanish.term_listing_es: 2,
        spanish.search_es: 1,
        spanish.anonymous_contact_form_es: 1,
    }


class AdminUser(HttpUser):
    """Logs in as administrator, then browses and edits articles."""

    weight = 1
    wait_time = between(3, 10)
    tasks = {
        english.front_page_en: 2,
        english.article_listing_en: 2,
        admin.edit_article: 2,
    }

    def on_start(self):
        try:
            admin.log_in(self)
        except TransactionError as ex:
            # The failure has been recorded; without a session there is
            # nothing left for this user to do.
            raise StopUser() from ex
