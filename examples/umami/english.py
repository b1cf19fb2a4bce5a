# SPDX-License-Identifier: BSD-3-Clause

"""Tasks for an anonymous user browsing the English version of the site."""

from __future__ import annotations

import random
from typing import Any

from locusteggs.drupal import SearchParams, search
from locusteggs.validate import Validate

import common


def front_page_en(user: Any) -> None:
    """Load the front page and its static assets."""
    common.load_titled_page(user, "/", "Home")


def recipe_listing_en(user: Any) -> None:
    """Load the recipe listing and its static assets."""
    common.load_titled_page(user, "/en/recipes/", "Recipes")


def recipe_en(user: Any) -> None:
    """Load a random recipe and its static assets."""
    recipe = random.choice(common.get_nodes(common.ContentType.RECIPE))
    common.load_node(user, recipe, True, "/en/recipes/%")


def article_listing_en(user: Any) -> None:
    """Load the article listing and its static assets."""
    common.load_titled_page(user, "/en/articles/", "Articles")


def article_en(user: Any) -> None:
    """Load a random article and its static assets."""
    article = random.choice(common.get_nodes(common.ContentType.ARTICLE))
    common.load_node(user, article, True, "/en/articles/%")


def basic_page_en(user: Any) -> None:
    """Load a random basic page and its static assets."""
    page = random.choice(common.get_nodes(common.ContentType.BASIC_PAGE))
    common.load_node(user, page, True, "/en/basic page")


def page_by_nid(user: Any) -> None:
    """Load a random node by its node ID instead of its URL alias."""
    content_type = random.choice(list(common.ContentType))
    page = random.choice(common.get_nodes(content_type))
    common.load_titled_page(user, f"/node/{page.nid}", page.title_en, "/node/%nid")


def anonymous_contact_form_en(user: Any) -> None:
    """Load the contact form and post feedback."""
    common.anonymous_contact_form(user, True)


def search_en(user: Any) -> None:
    """Search for a random phrase made of words from node titles."""
    search_phrase = " ".join(common.random_words(3, True))
    params = SearchParams(
        keys=search_phrase,
        url="/en/search/node",
        search_page_validation=Validate.builder().title("Search").build(),
        # The results page has the search phrase in its title.
        results_page_validation=Validate.builder().title(search_phrase).build(),
    )
    search(user, params)


def term_listing_en(user: Any) -> None:
    """Load the listing of a random taxonomy term and its static assets."""
    term = random.choice(common.get_terms())
    common.load_titled_page(user, term.url_en, term.title_en, "/en/term")
