"""AutocompleteRanker ordering rules."""

from docsearch.application.dtos.search import AutocompleteCandidate
from docsearch.application.services.autocomplete_ranker import AutocompleteRanker


class TestAutocompleteRanker:
    def test_prefix_matches_before_non_matches(self) -> None:
        ranked = AutocompleteRanker().rank(["Ajava", "Java Guide"], "java")
        assert ranked == ["Java Guide", "Ajava"]

    def test_shorter_prefix_match_first(self) -> None:
        ranked = AutocompleteRanker().rank(["Java Guide", "java Tips"], "Java")
        assert ranked == ["java Tips", "Java Guide"]

    def test_case_insensitive_prefix(self) -> None:
        ranked = AutocompleteRanker().rank(["xJAVA", "JAVA"], "jav")
        assert ranked[0] == "JAVA"

    def test_non_matches_sorted_lexicographically(self) -> None:
        ranked = AutocompleteRanker().rank(["Zeta", "alpha", "Beta"], "qq")
        assert ranked == ["alpha", "Beta", "Zeta"]

    def test_equal_keys_keep_input_order(self) -> None:
        ranked = AutocompleteRanker().rank(["JavaX", "javax"], "java")
        assert ranked == ["JavaX", "javax"]

    def test_ranking_is_idempotent(self) -> None:
        """Re-ranking an already ranked list returns the same order."""
        ranker = AutocompleteRanker()
        candidates = ["Python Notes", "java Tips", "Java Guide", "Javelin", "ja", "Ajax"]
        once = ranker.rank(candidates, "ja")
        assert ranker.rank(once, "ja") == once

    def test_empty_input(self) -> None:
        assert AutocompleteRanker().rank([], "java") == []

    def test_candidates_ranked_on_text(self) -> None:
        candidates = [
            AutocompleteCandidate(text="Java Guide", type="title", document_id="d1"),
            AutocompleteCandidate(text="Ajava", type="title"),
            AutocompleteCandidate(text="java Tips", type="title", document_id="d2"),
        ]

        ranked = AutocompleteRanker().rank(candidates, "java")

        assert [c.text for c in ranked] == ["java Tips", "Java Guide", "Ajava"]
        assert ranked[0].document_id == "d2"
