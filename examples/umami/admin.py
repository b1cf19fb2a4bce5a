# SPDX-License-Identifier: BSD-3-Clause

"""Tasks for a logged in administrator."""

from __future__ import annotations

import os
import random
from typing import Any

from locusteggs.drupal import (
    Login,
    get_form,
    get_form_controls,
    get_form_values,
    log_in as drupal_log_in,
)
from locusteggs.failure import set_failure
from locusteggs.validate import Validate, validate_and_load_static_assets

import common

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "P@ssw0rd1234"


def admin_credentials(user: Any) -> tuple[str, str]:
    """
    Return the administrator's user name and password.

    These come from the C{--admin-username} and C{--admin-password}
    command line options, which default to the C{ADMIN_USERNAME} and
    C{ADMIN_PASSWORD} environment variables. When Locust is run without
    parsing a command line, the environment variables are read directly.
    """
    options = getattr(user.environment, "parsed_options", None)
    username = getattr(options, "admin_username", None) or os.environ.get(
        "ADMIN_USERNAME", DEFAULT_USERNAME
    )
    password = getattr(options, "admin_password", None) or os.environ.get(
        "ADMIN_PASSWORD", DEFAULT_PASSWORD
    )
    return username, password


def log_in(user: Any) -> None:
    """Log in to the site."""
    username, password = admin_credentials(user)
    drupal_log_in(
        user, Login(username=username, password=password, url="/en/user/login")
    )


def edit_article(user: Any) -> None:
    """Load a random article, then save it through its edit form."""
    article = random.choice(common.get_nodes(common.ContentType.ARTICLE))
    edit_url = f"/en/node/{article.nid}/edit"

    with user.client.get(
        article.url_en, name="auth /en/articles/%", catch_response=True
    ) as response:
        validate_and_load_static_assets(
            user,
            response,
            # The edit link is only shown to users that may edit the article.
            Validate.builder().title(article.title_en).text(edit_url).build(),
        )

    with user.client.get(
        edit_url, name="auth /en/node/%/edit", catch_response=True
    ) as response:
        edit_page = validate_and_load_static_assets(
            user, response, Validate.builder().title("Edit Article").build()
        )

    edit_form = get_form(edit_page, "node-article-edit-form")
    params = get_form_controls(edit_form)
    params.update(get_form_values(edit_form, ("form_build_id", "form_token", "form_id")))
    params["op"] = "Save (this translation)"

    with user.client.post(
        edit_url, data=params, name="auth /en/node/%/edit", catch_response=True
    ) as response:
        # A successful save is redirected to the article.
        if not response.history:
            set_failure(response, f"{response.url}: saving article failed")
        validate_and_load_static_assets(
            user, response, Validate.builder().title(article.title_en).build()
        )
