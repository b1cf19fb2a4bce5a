# SPDX-License-Identifier: BSD-3-Clause

"""Tasks for an anonymous user browsing the Spanish version of the site."""

from __future__ import annotations

import random
from typing import Any

from locusteggs.drupal import SearchParams, search
from locusteggs.validate import Validate

import common


def front_page_es(user: Any) -> None:
    """Load the front page and its static assets."""
    common.load_titled_page(user, "/es", "Inicio")


def recipe_listing_es(user: Any) -> None:
    """Load the recipe listing and its static assets."""
    common.load_titled_page(user, "/es/recipes/", "Recetas")


def recipe_es(user: Any) -> None:
    """Load a random recipe and its static assets."""
    recipe = random.choice(common.get_nodes(common.ContentType.RECIPE))
    common.load_node(user, recipe, False, "/es/recipes/%")


def article_listing_es(user: Any) -> None:
    """Load the article listing and its static assets."""
    common.load_titled_page(user, "/es/articles/", "Artículos")


def article_es(user: Any) -> None:
    """Load a random article and its static assets."""
    article = random.choice(common.get_nodes(common.ContentType.ARTICLE))
    common.load_node(user, article, False, "/es/articles/%")


def basic_page_es(user: Any) -> None:
    """Load a random basic page and its static assets."""
    page = random.choice(common.get_nodes(common.ContentType.BASIC_PAGE))
    common.load_node(user, page, False, "/es/basic page")


def anonymous_contact_form_es(user: Any) -> None:
    """Load the contact form and post feedback."""
    common.anonymous_contact_form(user, False)


def search_es(user: Any) -> None:
    """Search for a random phrase made of words from node titles."""
    search_phrase = " ".join(common.random_words(3, False))
    params = SearchParams(
        keys=search_phrase,
        url="/es/search/node",
        search_page_validation=Validate.builder().title("Buscar").build(),
        results_page_validation=Validate.builder().title(search_phrase).build(),
    )
    search(user, params)


def term_listing_es(user: Any) -> None:
    """Load the listing of a random taxonomy term and its static assets."""
    term = random.choice(common.get_terms())
    common.load_titled_page(user, term.url_es, term.title_es, "/es/term")
