"""Plural-to-singular naming strategies used to recognise container elements.

A strategy is any callable that takes an element name and returns the
singular form it would wrap, or None when it has no opinion. None always
means "not a container", so a strategy never has to be right about
arbitrary vocabularies: the resolver still checks that the singular form is
actually what the container holds.
"""

from typing import Callable, Optional

PluralToSingular = Callable[[str], Optional[str]]

# Suffixes that take "-es" in the plural (boxes, matches, dishes, quizzes, classes)
_ES_SUFFIXES = ("sses", "xes", "ches", "shes", "zes")


def no_containers(name: str) -> Optional[str]:
    """Never recognise a container."""
    return None


def english_singular(name: str) -> Optional[str]:
    """Strip common English plural endings.

    Examples:
        categories -> category, boxes -> box, books -> book, address -> None
    """
    lower = name.lower()

    if len(name) > 3 and lower.endswith("ies"):
        return name[:-3] + ("Y" if name[-3:].isupper() else "y")

    for suffix in _ES_SUFFIXES:
        if lower.endswith(suffix) and len(name) > len(suffix):
            return name[:-2]

    if len(name) > 1 and lower.endswith("s") and not lower.endswith("ss"):
        return name[:-1]

    return None


def alias_singular(aliases: dict[str, str]) -> PluralToSingular:
    """Strategy backed by an explicit plural -> singular table."""
    table = dict(aliases)

    def lookup(name: str) -> Optional[str]:
        return table.get(name)

    return lookup


def chain(*strategies: PluralToSingular) -> PluralToSingular:
    """Combine strategies; the first non-None answer wins."""

    def combined(name: str) -> Optional[str]:
        for strategy in strategies:
            singular = strategy(name)
            if singular:
                return singular
        return None

    return combined


STRATEGIES: dict[str, PluralToSingular] = {
    "english": english_singular,
    "none": no_containers,
}


def build_strategy(strategy: str = "english", aliases: Optional[dict[str, str]] = None) -> PluralToSingular:
    """Build the configured strategy, consulting aliases before the rule.

    Raises:
        ValueError: If the strategy name is unknown
    """
    if strategy not in STRATEGIES:
        valid = ", ".join(sorted(STRATEGIES))
        raise ValueError(f"Unknown naming strategy '{strategy}'. Valid options: {valid}")

    base = STRATEGIES[strategy]
    if aliases:
        return chain(alias_singular(aliases), base)
    return base
