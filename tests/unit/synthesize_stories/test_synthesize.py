"""Tests for synthesize_stories.synthesize module."""

import threading

from synthesize_stories.analysis import AnalysisError
from synthesize_stories.synthesize import (
    WHAT_TO_WATCH,
    build_analysis_input,
    heuristic_analysis,
    synthesize_stories,
    synthesize_story_detail,
)

QUOTED_SUMMARY = (
    'The Senate voted 52-48 on Tuesday. "This plan will cut costs for families," said Senator Jane Smith. '
    'Analyst Mark Lee said "the vote will shape the midterm campaigns."'
)


class FakeAnalysis:
    """Records calls and returns canned paragraphs or raises."""

    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[str, int]] = []
        self._lock = threading.Lock()

    def generate_analysis(self, text: str, max_tokens: int):
        with self._lock:
            self.calls.append((text, max_tokens))
        if self.error is not None:
            raise self.error
        return self.result


def _types(result) -> list[str]:
    return [block.type for block in result.full_content]


class TestHeuristicAnalysis:
    def test_mentions_source_count_and_title(self, make_document) -> None:
        docs = [
            make_document("a", "Senate Passes Infrastructure Bill After Close Vote", "x"),
            make_document("b", "Other title", "y"),
        ]
        assert heuristic_analysis(docs) == [
            "Coverage from 2 sources. Multiple outlets are reporting on Senate Passes Infrastructure Bill After.",
            WHAT_TO_WATCH,
        ]

    def test_analysis_input_is_capped(self, make_document) -> None:
        docs = [make_document("a", "T", "word " * 500, publisher="NPR")]
        text = build_analysis_input(docs, max_chars=100)
        assert len(text) == 100
        assert text.startswith("[NPR] word")


class TestSynthesizeStoryDetail:
    def test_block_order_and_voices(self, make_document) -> None:
        docs = [make_document("a", "Senate passes infrastructure bill", QUOTED_SUMMARY)]
        result = synthesize_story_detail(docs)

        types = _types(result)
        assert types == sorted(types, key=["factual", "opinion", "interpretation"].index)
        opinions = [b for b in result.full_content if b.type == "opinion"]
        assert [b.attribution for b in opinions] == ["Senator Jane Smith", "Analyst Mark Lee"]
        assert [(v.name, v.role) for v in result.quoted_voices] == [
            ("Senator Jane Smith", "Elected Official"),
            ("Analyst Mark Lee", "Independent Analyst"),
        ]
        assert result.used_external_analysis is False

    def test_no_opinion_blocks_without_quotes(self, make_document) -> None:
        docs = [make_document("a", "Senate passes bill", "The Senate voted 52-48 on Tuesday to pass the bill.")]
        result = synthesize_story_detail(docs)
        assert "opinion" not in _types(result)
        assert result.quoted_voices == []

    def test_heuristic_interpretation_without_generator(self, make_document) -> None:
        docs = [make_document("a", "Senate passes bill", "The Senate voted 52-48 on Tuesday.")]
        result = synthesize_story_detail(docs)
        interpretation = [b.text for b in result.full_content if b.type == "interpretation"]
        assert interpretation == heuristic_analysis(docs)

    def test_external_analysis_replaces_heuristic(self, make_document) -> None:
        analysis = FakeAnalysis(result=["First paragraph.", " Second paragraph. ", "Third paragraph."])
        docs = [make_document("a", "Senate passes bill", "The Senate voted 52-48 on Tuesday.")]
        result = synthesize_story_detail(docs, analysis=analysis, max_input_chars=20, max_tokens=50)

        interpretation = [b.text for b in result.full_content if b.type == "interpretation"]
        assert interpretation == ["First paragraph.", "Second paragraph."]
        assert result.used_external_analysis is True
        text, max_tokens = analysis.calls[0]
        assert len(text) <= 20
        assert max_tokens == 50

    def test_generator_failure_keeps_heuristic(self, make_document) -> None:
        analysis = FakeAnalysis(error=AnalysisError("timeout"))
        docs = [make_document("a", "Senate passes bill", "The Senate voted 52-48 on Tuesday.")]
        result = synthesize_story_detail(docs, analysis=analysis)
        assert result.used_external_analysis is False
        assert result.full_content[-1].text == WHAT_TO_WATCH

    def test_unexpected_exception_keeps_heuristic(self, make_document) -> None:
        analysis = FakeAnalysis(error=ConnectionError("reset"))
        docs = [make_document("a", "Senate passes bill", "The Senate voted 52-48 on Tuesday.")]
        assert synthesize_story_detail(docs, analysis=analysis).used_external_analysis is False

    def test_empty_or_malformed_response_keeps_heuristic(self, make_document) -> None:
        docs = [make_document("a", "Senate passes bill", "The Senate voted 52-48 on Tuesday.")]
        for result in ([], ["   "], "not a list", None):
            detail = synthesize_story_detail(docs, analysis=FakeAnalysis(result=result))
            assert detail.used_external_analysis is False
            assert detail.full_content[-1].text == WHAT_TO_WATCH

    def test_empty_story(self) -> None:
        result = synthesize_story_detail([])
        assert result.full_content == []
        assert result.quoted_voices == []


class TestSynthesizeStories:
    def test_results_keyed_in_input_order(self, make_document) -> None:
        stories = {
            f"s{i}": [make_document(f"d{i}", f"Story {i} headline", f"Council approved {i} new routes today.")]
            for i in range(5)
        }
        results = synthesize_stories(stories, max_workers=3)
        assert list(results) == [f"s{i}" for i in range(5)]
        assert all(r.full_content for r in results.values())

    def test_failure_isolated_per_story(self, make_document) -> None:
        class SelectiveAnalysis(FakeAnalysis):
            def generate_analysis(self, text: str, max_tokens: int):
                if "broken" in text:
                    raise AnalysisError("boom")
                return ["Neutral analysis."]

        stories = {
            "ok": [make_document("a", "Transit plan", "Council approved 12 new routes.")],
            "bad": [make_document("b", "Budget plan", "A broken summary with 3 numbers.")],
        }
        results = synthesize_stories(stories, analysis=SelectiveAnalysis(), max_workers=2)
        assert results["ok"].used_external_analysis is True
        assert results["bad"].used_external_analysis is False

    def test_empty(self) -> None:
        assert synthesize_stories({}) == {}
