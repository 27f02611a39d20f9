import pytest
from app.core.enums import ResultType
from app.schemas.search import LexicalMatch, SemanticMatch
from app.services.ranking import (
    LEXICAL_FALLBACK_THRESHOLD,
    MAX_RESULTS,
    needs_lexical_fallback,
    rank_results,
)

pytestmark = pytest.mark.search


def semantic(id, similarity, title=None):
    return SemanticMatch(id=id, title=title or f"Servicio {id}", similarity=similarity)


def lexical(id, type=ResultType.SERVICE):
    return LexicalMatch(id=id, type=type, title=f"Resultado {id}")


class TestRankResults:

    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    def test_blank_query(self, query):
        assert rank_results(query, [semantic("a", 0.9)], [lexical("b")]) == []

    def test_semantic_wins_dedup_and_sorts_first(self):
        results = rank_results("plomero", [semantic("a", 0.9)], [lexical("b"), lexical("a")])

        assert [r.id for r in results] == ["a", "b"]
        assert results[0].similarity == 0.9
        assert results[0].data["semantic_match"] is True
        assert results[1].similarity is None
        assert results[1].data["semantic_match"] is False

    def test_deterministic(self):
        sem = [semantic("a", 0.4), semantic("b", 0.8), semantic("c", 0.6)]
        lex = [lexical("d"), lexical("e"), lexical("b")]

        first = rank_results("limpieza profunda", sem, lex)
        second = rank_results("limpieza profunda", sem, lex)

        assert [r.id for r in first] == [r.id for r in second] == ["b", "c", "a", "d", "e"]

    def test_similarity_floor(self):
        sem = [semantic("a", 0.29), semantic("b", 0.3), semantic("c", 0.95)]
        results = rank_results("electricista", sem, [])

        assert [r.id for r in results] == ["c", "b"]

    def test_custom_floor(self):
        sem = [semantic("a", 0.5), semantic("b", 0.7)]
        results = rank_results("pintor", sem, [], similarity_floor=0.6)

        assert [r.id for r in results] == ["b"]

    def test_lexical_keeps_source_order(self):
        lex = [lexical("z"), lexical("p1", ResultType.PROFESSIONAL), lexical("m")]
        results = rank_results("carpintero", [], lex)

        assert [r.id for r in results] == ["z", "p1", "m"]
        assert results[1].type == ResultType.PROFESSIONAL
        assert "semantic_match" not in results[1].data

    def test_duplicate_lexical_first_wins(self):
        lex = [LexicalMatch(id="x", title="first"), LexicalMatch(id="x", title="second")]
        results = rank_results("x", [], lex)

        assert len(results) == 1
        assert results[0].title == "first"

    def test_empty_inputs(self):
        assert rank_results("jardinería", [], []) == []

    def test_truncated(self):
        lex = [lexical(f"l{i}") for i in range(30)]
        results = rank_results("servicio", [], lex)

        assert len(results) == MAX_RESULTS == 20
        assert results[-1].id == "l19"

    def test_ids_unique(self):
        sem = [semantic("a", 0.9), semantic("a", 0.5)]
        lex = [lexical("a"), lexical("b"), lexical("b")]
        results = rank_results("consulta", sem, lex)

        ids = [r.id for r in results]
        assert len(ids) == len(set(ids))


class TestLexicalFallbackBoundary:

    def test_threshold_value(self):
        assert LEXICAL_FALLBACK_THRESHOLD == 5

    @pytest.mark.parametrize("count,expected", [(0, True), (4, True), (5, False), (6, False)])
    def test_predicate(self, count, expected):
        assert needs_lexical_fallback(count) is expected

    def test_four_semantic_uses_lexical(self):
        sem = [semantic(f"s{i}", 0.9 - i * 0.1) for i in range(4)]
        results = rank_results("aire acondicionado", sem, [lexical("l1")])

        assert [r.id for r in results] == ["s0", "s1", "s2", "s3", "l1"]

    def test_exactly_five_semantic_skips_lexical(self):
        sem = [semantic(f"s{i}", 0.9 - i * 0.1) for i in range(5)]
        results = rank_results("aire acondicionado", sem, [lexical("l1")])

        assert [r.id for r in results] == ["s0", "s1", "s2", "s3", "s4"]

    def test_below_floor_does_not_count(self):
        sem = [semantic(f"s{i}", 0.9) for i in range(4)] + [semantic("weak", 0.1)]
        results = rank_results("aire acondicionado", sem, [lexical("l1")])

        assert "l1" in [r.id for r in results]
        assert "weak" not in [r.id for r in results]
