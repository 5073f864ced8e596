"""Repetition patterns for element names that occur more than once."""

from typing import Sequence

from xml2schema.models.schema import ElementPattern, ElementRecord

SIMILARITY_CHECKS = 4


def similarity(first: ElementRecord, second: ElementRecord) -> float:
    """Structural similarity between two records, from 0.0 to 1.0.

    One point each for equal name, equal inferred type, equal number of
    direct children and equal number of attributes.
    """
    score = 0
    if first.name == second.name:
        score += 1
    if first.inferred_type == second.inferred_type:
        score += 1
    if len(first.children) == len(second.children):
        score += 1
    if len(first.attributes) == len(second.attributes):
        score += 1
    return score / SIMILARITY_CHECKS


def mean_similarity(records: Sequence[ElementRecord]) -> float:
    """Mean similarity of every record against the first one in the group."""
    if len(records) < 2:
        return 1.0

    first = records[0]
    total = sum(similarity(first, other) for other in records[1:])
    return total / (len(records) - 1)


def detect_patterns(
    elements: Sequence[ElementRecord],
    frequency: dict[str, int],
) -> list[ElementPattern]:
    """Build one pattern per element name seen more than once.

    Args:
        elements: Flat record list from a scan
        frequency: Document-wide name -> count table

    Returns:
        Patterns in frequency-table order
    """
    groups: dict[str, list[ElementRecord]] = {}
    for element in elements:
        groups.setdefault(element.name, []).append(element)

    patterns = []
    for name, count in frequency.items():
        if count <= 1:
            continue
        group = groups.get(name)
        if not group:
            continue
        patterns.append(ElementPattern(
            pattern_name=f"{name}_pattern",
            element_names=(name,),
            similarity_score=mean_similarity(group),
            parent_context=group[0].parent_name,
            is_repeating=True,
        ))
    return patterns
