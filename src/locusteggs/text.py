# SPDX-License-Identifier: BSD-3-Clause

"""Generate random text, for example to fill in forms."""

from __future__ import annotations

import random
import string

_ALPHANUMERIC = string.ascii_letters + string.digits


def random_word(length: int) -> str:
    """Return a "word" of C{length} random alphanumeric characters."""
    if length < 0:
        raise ValueError(f"Negative word length: {length}")
    return "".join(random.choices(_ALPHANUMERIC, k=length))


def random_words(number: int) -> str:
    """
    Return a "sentence" of C{number} random alphanumeric "words",
    each between 3 and 12 characters long.
    """
    return " ".join(random_word(random.randint(3, 12)) for _ in range(number))
