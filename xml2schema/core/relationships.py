"""Heuristic relationship detection over a SchemaModel.

All three detectors are pure functions of the model. Confidence scores are
heuristics and never reach 1.0.
"""

import logging
from collections import Counter
from typing import Optional

from xml2schema.models.relations import (
    ManyToManyRelation,
    OneToManyRelation,
    ParentChildRelation,
    RelationKind,
)
from xml2schema.models.schema import SchemaModel

logger = logging.getLogger(__name__)

# One-to-many confidence: base + step per sibling, capped
ONE_TO_MANY_BASE = 0.5
ONE_TO_MANY_STEP = 0.1
ONE_TO_MANY_CAP = 0.9

# Many-to-many confidence by how many of the two parents repeat document-wide
MANY_TO_MANY_BOTH_REPEAT = 0.8
MANY_TO_MANY_ONE_REPEATS = 0.6
MANY_TO_MANY_NONE_REPEAT = 0.4


def one_to_many_confidence(cardinality: int) -> float:
    """Confidence for a parent holding ``cardinality`` same-named children."""
    if cardinality <= 1:
        return 0.0
    return min(ONE_TO_MANY_CAP, round(ONE_TO_MANY_BASE + ONE_TO_MANY_STEP * cardinality, 10))


def many_to_many_confidence(model: SchemaModel, first: str, second: str) -> float:
    """Confidence for two parents sharing a child name."""
    first_repeats = model.element_frequency.get(first, 0) > 1
    second_repeats = model.element_frequency.get(second, 0) > 1

    if first_repeats and second_repeats:
        return MANY_TO_MANY_BOTH_REPEAT
    if first_repeats or second_repeats:
        return MANY_TO_MANY_ONE_REPEATS
    return MANY_TO_MANY_NONE_REPEAT


def detect_one_to_many(model: SchemaModel) -> list[OneToManyRelation]:
    """Find parents that hold more than one direct child of the same name.

    Cardinality is the sibling count under one parent record, not the
    document-wide frequency.
    """
    relations = []
    for element in model.elements:
        if not element.children:
            continue

        counts = Counter(element.child_names)
        for child_name, count in counts.items():
            if count > 1:
                relations.append(OneToManyRelation(
                    parent=element.name,
                    child=child_name,
                    cardinality=count,
                    confidence=one_to_many_confidence(count),
                ))

    logger.debug(f"Detected {len(relations)} one-to-many relations")
    return relations


def detect_many_to_many(model: SchemaModel) -> list[ManyToManyRelation]:
    """Find element names reused under more than one distinct parent.

    Emits one relation per ordered pair of distinct parents, so a name shared
    by ``n`` parents produces ``n * (n - 1)`` relations.
    """
    # Name -> distinct parent names, kept in first-seen order
    contexts: dict[str, dict[str, None]] = {}
    for element in model.elements:
        if element.parent_name is None:
            continue
        contexts.setdefault(element.name, {})[element.parent_name] = None

    relations = []
    for linking_name, parents in contexts.items():
        if len(parents) < 2:
            continue

        for first in parents:
            for second in parents:
                if first == second:
                    continue
                relations.append(ManyToManyRelation(
                    first_element=first,
                    second_element=second,
                    linking_element=linking_name,
                    confidence=many_to_many_confidence(model, first, second),
                ))

    logger.debug(f"Detected {len(relations)} many-to-many relations")
    return relations


def _first_parents(model: SchemaModel) -> dict[str, Optional[str]]:
    """Name -> parent name of the first record carrying that name."""
    parents: dict[str, Optional[str]] = {}
    for element in model.elements:
        if element.name not in parents:
            parents[element.name] = element.parent_name
    return parents


def element_depth(model: SchemaModel, parent_name: Optional[str], first_parents: Optional[dict] = None) -> int:
    """Hops from ``parent_name`` up to the root.

    Each hop resolves a name through the *first* record with that name, so
    depth under a repeated ancestor name is approximate: whichever occurrence
    appears first in the flat list decides. The walk stops at the root name,
    at a name with no known parent, or at a name it has already visited.
    """
    if first_parents is None:
        first_parents = _first_parents(model)

    depth = 0
    visited: set[str] = set()
    current = parent_name
    while current is not None and current != model.root_element_name:
        if current in visited:
            break
        visited.add(current)
        depth += 1
        current = first_parents.get(current)
    return depth


def detect_hierarchical(model: SchemaModel) -> list[ParentChildRelation]:
    """One parent-child relation per non-root record."""
    first_parents = _first_parents(model)

    relations = []
    for element in model.elements:
        if element.parent_name is None:
            continue
        relations.append(ParentChildRelation(
            parent=element.parent_name,
            child=element.name,
            depth=element_depth(model, element.parent_name, first_parents),
            is_direct_child=True,
        ))

    logger.debug(f"Detected {len(relations)} parent-child relations")
    return relations


class RelationshipDetector:
    """Runs the configured subset of relationship detectors."""

    DETECTORS = {
        RelationKind.ONE_TO_MANY: detect_one_to_many,
        RelationKind.MANY_TO_MANY: detect_many_to_many,
        RelationKind.HIERARCHICAL: detect_hierarchical,
    }

    def __init__(self, kinds: Optional[list[RelationKind]] = None):
        self.kinds = list(kinds) if kinds is not None else list(RelationKind)

    def detect_one_to_many(self, model: SchemaModel) -> list[OneToManyRelation]:
        return detect_one_to_many(model)

    def detect_many_to_many(self, model: SchemaModel) -> list[ManyToManyRelation]:
        return detect_many_to_many(model)

    def detect_hierarchical(self, model: SchemaModel) -> list[ParentChildRelation]:
        return detect_hierarchical(model)

    def detect(self, model: SchemaModel) -> dict[RelationKind, list]:
        """Run every enabled detector. Disabled kinds map to an empty list."""
        return {
            kind: self.DETECTORS[kind](model) if kind in self.kinds else []
            for kind in RelationKind
        }
