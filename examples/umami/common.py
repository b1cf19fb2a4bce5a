# SPDX-License-Identifier: BSD-3-Clause

"""
Content of the Umami demo site and tasks shared between languages.

The node and term tables below describe content that Drupal's Umami
install profile creates, so pages can be validated by title.
"""

from __future__ import annotations

import random
from enum import Enum, auto
from logging import getLogger
from typing import Any, NamedTuple

from locusteggs.drupal import get_form, get_form_value
from locusteggs.failure import set_failure
from locusteggs.page import load_static_elements
from locusteggs.validate import Validate, validate_and_load_static_assets

_LOG = getLogger(__name__)


class ContentType(Enum):
    """The content types defined by the Umami site."""

    ARTICLE = auto()
    BASIC_PAGE = auto()
    RECIPE = auto()


class Node(NamedTuple):
    """A node that the load test visits, in both languages."""

    nid: int
    url_en: str
    url_es: str
    title_en: str
    title_es: str


class Term(NamedTuple):
    """A taxonomy term that the load test visits, in both languages."""

    url_en: str
    url_es: str
    title_en: str
    title_es: str


_NODES = {
    ContentType.ARTICLE: (
        Node(
            11,
            "/en/articles/give-it-a-go-and-grow-your-own-herbs",
            "/es/articles/prueba-y-cultiva-tus-propias-hierbas",
            "Give it a go and grow your own herbs",
            "Prueba y cultiva tus propias hierbas",
        ),
        Node(
            12,
            "/en/articles/dairy-free-and-delicious-milk-chocolate",
            "/es/articles/delicioso-chocolate-sin-lactosa",
            "Dairy-free and delicious milk chocolate",
            "Delicioso chocolate sin lactosa",
        ),
        Node(
            13,
            "/en/articles/the-real-deal-for-supermarket-savvy-shopping",
            "/es/articles/el-verdadeo-negocio-para-comprar-en-el-supermercado",
            "The real deal for supermarket savvy shopping",
            "El verdadero negocio para comprar en el supermercado",
        ),
        Node(
            14,
            "/en/articles/the-umami-guide-to-our-favourite-mushrooms",
            "/es/articles/guia-umami-de-nuestras-setas-preferidas",
            "The Umami guide to our favorite mushrooms",
            "Guía Umami de nuestras setas preferidas",
        ),
        Node(
            15,
            "/en/articles/lets-hear-it-for-carrots",
            "/es/articles/un-aplauso-para-las-zanahorias",
            "Let&#039;s hear it for carrots",
            "Un aplauso para las zanahorias",
        ),
        Node(
            16,
            "/en/articles/baking-mishaps-our-troubleshooting-tips",
            "/es/articles/percances-al-hornear-nuestros-consejos-para-solucionar-problemas",
            "Baking mishaps - our troubleshooting tips",
            "Percances al hornear - nuestros consejos para solucionar los problemas",
        ),
        Node(
            17,
            "/en/articles/skip-the-spirits-with-delicious-mocktails",
            "/es/articles/salta-los-espiritus-con-deliciosos-cocteles-sin-alcohol",
            "Skip the spirits with delicious mocktails",
            "Salta los espíritus con deliciosos cócteles sin alcohol",
        ),
    ),
    ContentType.BASIC_PAGE: (
        Node(
            19,
            "/en/about-umami",
            "/es/acerca-de-umami",
            "About Umami",
            "Acerca de Umami",
        ),
    ),
    ContentType.RECIPE: (
        Node(
            1,
            "/en/recipes/deep-mediterranean-quiche",
            "/es/recipes/quiche-mediterráneo-profundo",
            "Deep mediterranean quiche",
            "Quiche mediterráneo profundo",
        ),
        Node(
            2,
            "/en/recipes/vegan-chocolate-and-nut-brownies",
            "/es/recipes/bizcochos-veganos-de-chocolate-y-nueces",
            "Vegan chocolate and nut brownies",
            "Bizcochos veganos de chocolate y nueces",
        ),
        Node(
            3,
            "/en/recipes/super-easy-vegetarian-pasta-bake",
            "/es/recipes/pasta-vegetariana-horno-super-facil",
            "Super easy vegetarian pasta bake",
            "Pasta vegetariana al horno súper fácil",
        ),
        Node(
            4,
            "/en/recipes/watercress-soup",
            "/es/recipes/sopa-de-berro",
            "Watercress soup",
            "Sopa de berro",
        ),
        Node(
            5,
            "/en/recipes/victoria-sponge-cake",
            "/es/recipes/pastel-victoria",
            "Victoria sponge cake",
            "Pastel Victoria",
        ),
        Node(
            6,
            "/en/recipes/gluten-free-pizza",
            "/es/recipes/pizza-sin-gluten",
            "Gluten free pizza",
            "Pizza sin gluten",
        ),
        Node(
            7,
            "/en/recipes/thai-green-curry",
            "/es/recipes/curry-verde-tailandes",
            "Thai green curry",
            "Curry verde tailandés",
        ),
        Node(
            8,
            "/en/recipes/crema-catalana",
            "/es/recipes/crema-catalana",
            "Crema catalana",
            "Crema catalana",
        ),
        Node(
            9,
            "/en/recipes/fiery-chili-sauce",
            "/es/recipes/salsa-de-chile-ardiente",
            "Fiery chili sauce",
            "Salsa de chile ardiente",
        ),
        Node(
            10,
            "/en/recipes/borscht-with-pork-ribs",
            "/es/recipes/borscht-con-costillas-de-cerdo",
            "Borscht with pork ribs",
            "Borscht con costillas de cerdo",
        ),
    ),
}

_TERMS = (
    Term(
        "/en/recipe-category/accompaniments",
        "/es/recipe-category/acompañamientos",
        "Accompaniments",
        "Acompañamientos",
    ),
    Term("/en/recipe-category/desserts", "/es/recipe-category/postres", "Desserts", "Postres"),
    Term(
        "/en/recipe-category/main-courses",
        "/es/recipe-category/platos-principales",
        "Main courses",
        "Platos principales",
    ),
    Term("/en/recipe-category/snacks", "/es/recipe-category/tentempiés", "Snacks", "Tentempiés"),
    Term("/en/recipe-category/starters", "/es/recipe-category/entrantes", "Starters", "Entrantes"),
    Term("/en/tags/alcohol-free", "/es/tags/sin-alcohol", "Alcohol free", "Sin alcohol"),
    Term("/en/tags/baked", "/es/tags/horneado", "Baked", "Horneado"),
    Term("/en/tags/baking", "/es/tags/cocción", "Baking", "Cocción"),
    Term("/en/tags/breakfast", "/es/tags/desayuno", "Breakfast", "Desayuno"),
    Term("/en/tags/cake", "/es/tags/pastel", "Cake", "Pastel"),
    Term("/en/tags/carrots", "/es/tags/zanahorias", "Carrots", "Zanahorias"),
    Term("/en/tags/chocolate", "/es/tags/chocolate", "Chocolate", "Chocolate"),
    Term("/en/tags/cocktail-party", "/es/tags/fiesta-de-coctel", "Cocktail party", "Fiesta de coctel"),
    Term("/en/tags/dairy-free", "/es/tags/sin-Lactosa", "Dairy-free", "Sin Lactosa"),
    Term("/en/tags/dessert", "/es/tags/postre", "Dessert", "Postre"),
    Term("/en/tags/dinner-party", "/es/tags/fiesta-de-cena", "Dinner party", "Fiesta de cena"),
    Term("/en/tags/drinks", "/es/tags/bebidas", "Drinks", "Bebidas"),
    Term("/en/tags/egg", "/es/tags/huevo", "Egg", "Huevo"),
    Term("/en/tags/grow-your-own", "/es/tags/cultiva-los-tuyos", "Grow your own", "Cultiva los tuyos"),
    Term("/en/tags/healthy", "/es/tags/saludable", "Healthy", "Saludable"),
    Term("/en/tags/herbs", "/es/tags/hierbas", "Herbs", "Hierbas"),
    Term("/en/tags/learn-to-cook", "/es/tags/aprender-a-cocinar", "Learn to cook", "Aprender a cocinar"),
    Term("/en/tags/mushrooms", "/es/tags/champiñones", "Mushrooms", "Champiñones"),
    Term("/en/tags/oats", "/es/tags/avena", "Oats", "Avena"),
    Term("/en/tags/party", "/es/tags/fiesta", "Party", "Fiesta"),
    Term("/en/tags/pasta", "/es/tags/pastas", "Pasta", "Pastas"),
    Term("/en/tags/pastry", "/es/tags/repostería", "Pastry", "Repostería"),
    Term("/en/tags/seasonal", "/es/tags/estacional", "Seasonal", "Estacional"),
    Term("/en/tags/shopping", "/es/tags/compras", "Shopping", "Compras"),
    Term("/en/tags/soup", "/es/tags/sopa", "Soup", "Sopa"),
    Term("/en/tags/supermarkets", "/es/tags/supermercados", "Supermarkets", "Supermercados"),
    Term("/en/tags/vegan", "/es/tags/vegano", "Vegan", "Vegano"),
    Term("/en/tags/vegetarian", "/es/tags/vegetariano", "Vegetarian", "Vegetariano"),
)

# Articles and recipes are favored when picking random words.
_WORD_SOURCES = (
    ContentType.ARTICLE,
    ContentType.ARTICLE,
    ContentType.ARTICLE,
    ContentType.BASIC_PAGE,
    ContentType.RECIPE,
    ContentType.RECIPE,
    ContentType.RECIPE,
)


def get_nodes(content_type: ContentType) -> tuple[Node, ...]:
    """Return all nodes of the given content type."""
    return _NODES[content_type]


def get_terms() -> tuple[Term, ...]:
    """Return all taxonomy terms."""
    return _TERMS


def random_words(count: int, english: bool) -> list[str]:
    """
    Return C{count} words picked from the titles of random nodes,
    in English or Spanish.
    """
    words = []
    for _ in range(count):
        node = random.choice(get_nodes(random.choice(_WORD_SOURCES)))
        title = node.title_en if english else node.title_es
        word = random.choice(title.split())
        # Drop encoded apostrophes, which would not match when validating.
        words.append(word.replace("&#039;", ""))
    return words


def load_node(user: Any, node: Node, english: bool, name: str) -> None:
    """Load a node page and its static assets, validating the title."""
    url, title = (node.url_en, node.title_en) if english else (node.url_es, node.title_es)
    with user.client.get(url, name=name, catch_response=True) as response:
        validate_and_load_static_assets(
            user, response, Validate.builder().title(title).build()
        )


def load_titled_page(user: Any, url: str, title: str, name: str | None = None) -> str:
    """Load a page and its static assets, validating the title."""
    with user.client.get(url, name=name, catch_response=True) as response:
        return validate_and_load_static_assets(
            user, response, Validate.builder().title(title).build()
        )


def anonymous_contact_form(user: Any, english: bool) -> None:
    """Load the contact form in English or Spanish and post feedback."""
    contact_form_url = "/en/contact" if english else "/es/contact"
    contact_page = load_titled_page(
        user,
        contact_form_url,
        "Website feedback" if english else "Comentarios sobre el sitio web",
    )

    form = get_form(contact_page, "contact-message-feedback-form")
    params = {
        "name": " ".join(random_words(2, english)),
        "mail": f"{random_words(1, english)[0]}@example.com",
        "subject[0][value]": " ".join(random_words(8, english)),
        "message[0][value]": " ".join(random_words(12, english)),
        "form_build_id": get_form_value(form, "form_build_id"),
        "form_id": get_form_value(form, "form_id"),
        "op": "Send message",
    }
    with user.client.post(
        contact_form_url, data=params, catch_response=True
    ) as response:
        if not response.status_code:
            set_failure(
                response,
                f"{contact_form_url}: no response from server: {response.error}",
            )
        html = response.text
        # Drupal limits how often one IP address can submit the contact form.
        # That happens a lot during a load test, so it is not a failure.
        throttled_text = (
            "You cannot send more than"
            if english
            else "No le está permitido enviar más"
        )
        if throttled_text in html:
            _LOG.debug("%s: contact form submission throttled", contact_form_url)
        # Either way, a real browser would load the static assets.
        load_static_elements(user, html)
