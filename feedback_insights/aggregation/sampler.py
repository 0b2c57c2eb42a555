"""Bounded example sets for each category.

``add_example`` is the compatible policy: once full, every new text replaces
a random slot, so each arrival gets a flat 1/3 chance regardless of history.
``add_example_reservoir`` implements classic reservoir sampling, which needs
the number of texts already offered for the category.
"""

import random
from typing import Any

from ..config import MAX_EXAMPLES


def _as_examples(current: Any) -> list[str] | None:
    if not isinstance(current, list):
        return None
    if not all(isinstance(item, str) for item in current):
        return None
    return list(current)


def add_example(
    current: Any,
    text: str,
    capacity: int = MAX_EXAMPLES,
    rng: random.Random | None = None,
) -> list[str]:
    """Add ``text`` to an example set of at most ``capacity`` items.

    Args:
        current: Previously stored examples; anything but a list of strings
            is treated as absent
        text: New submission text
        capacity: Maximum number of examples kept
        rng: Random source, injectable for tests

    Returns:
        A new list; ``current`` is never mutated

    """
    examples = _as_examples(current)
    if examples is None:
        return [text]

    # Anything over capacity was written by someone else; trim it first
    examples = examples[:capacity]
    if len(examples) < capacity:
        examples.append(text)
        return examples

    idx = (rng or random).randrange(capacity)
    examples[idx] = text
    return examples


def add_example_reservoir(
    current: Any,
    text: str,
    seen: int,
    capacity: int = MAX_EXAMPLES,
    rng: random.Random | None = None,
) -> list[str]:
    """Reservoir-sample ``text`` as item number ``seen + 1`` of the stream.

    While under capacity every text is kept. After that item ``n`` replaces
    a random slot with probability ``capacity / n``.
    """
    examples = _as_examples(current)
    if examples is None:
        return [text]

    examples = examples[:capacity]
    if len(examples) < capacity:
        examples.append(text)
        return examples

    n = max(seen, len(examples)) + 1
    j = (rng or random).randrange(n)
    if j < capacity:
        examples[j] = text
    return examples
