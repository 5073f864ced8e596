"""Tests for plural-to-singular naming strategies."""

import pytest

from xml2schema.core.naming import (
    STRATEGIES,
    alias_singular,
    build_strategy,
    chain,
    english_singular,
    no_containers,
)


class TestEnglishSingular:
    """Tests for the english strategy."""

    @pytest.mark.parametrize("plural,singular", [
        ("books", "book"),
        ("Books", "Book"),
        ("categories", "category"),
        ("CATEGORIES", "CATEGORY"),
        ("boxes", "box"),
        ("matches", "match"),
        ("dishes", "dish"),
        ("classes", "class"),
        ("authors", "author"),
    ])
    def test_plurals(self, plural, singular):
        assert english_singular(plural) == singular

    @pytest.mark.parametrize("name", ["address", "person", "data", "s", ""])
    def test_no_opinion(self, name):
        """Test names the rule does not treat as plurals."""
        assert english_singular(name) is None


class TestStrategies:
    """Tests for strategy composition."""

    def test_no_containers(self):
        assert no_containers("books") is None

    def test_alias_lookup(self):
        strategy = alias_singular({"people": "person"})
        assert strategy("people") == "person"
        assert strategy("books") is None

    def test_chain_first_answer_wins(self):
        strategy = chain(alias_singular({"books": "volume"}), english_singular)
        assert strategy("books") == "volume"
        assert strategy("boxes") == "box"
        assert strategy("person") is None

    def test_build_strategy_default(self):
        assert build_strategy() is english_singular

    def test_build_strategy_with_aliases(self):
        strategy = build_strategy("none", {"people": "person"})
        assert strategy("people") == "person"
        assert strategy("books") is None

    def test_build_strategy_unknown(self):
        with pytest.raises(ValueError, match="Unknown naming strategy"):
            build_strategy("french")

    def test_registered_names(self):
        assert set(STRATEGIES) == {"english", "none"}
