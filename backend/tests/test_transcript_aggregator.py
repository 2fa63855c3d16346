"""
Unit tests for live transcript aggregation.
"""
import pytest

from models.transcript_models import (
    TranscriptToken,
    token_from_event,
    make_token_id,
    transcript_text,
    BOUNDARY_PUNCTUATION,
    BOUNDARY_PAUSE,
    BOUNDARY_END_OF_STREAM,
    BOUNDARY_OPEN,
)
from services.transcription.aggregator import TranscriptAggregator


def tok(text, start, end=None, is_final=True, confidence=0.9):
    end = start + 0.5 if end is None else end
    return TranscriptToken(
        id=make_token_id(int(start * 1000), int(end * 1000), is_final),
        text=text,
        start_time=start,
        end_time=end,
        is_final=is_final,
        confidence=confidence,
    )


class TestTokenFromEvent:
    """Test conversion of raw recognizer events."""

    def test_converts_milliseconds_and_builds_id(self):
        token = token_from_event(
            {"text": " force ", "start_ms": 1500, "end_ms": 2250, "is_final": True, "confidence": 0.8}
        )

        assert token.text == "force"
        assert token.start_time == 1.5
        assert token.end_time == 2.25
        assert token.is_final is True
        assert token.id == "segment-1500-2250-f"

    def test_provisional_id_suffix(self):
        token = token_from_event({"text": "bal", "start_ms": 0, "end_ms": 100})

        assert token.is_final is False
        assert token.id == "segment-0-100-p"

    def test_text_is_nfc_normalized(self):
        token = token_from_event({"text": "e\u0301", "start_ms": 0, "end_ms": 10, "is_final": True})

        assert token.text == "\u00e9"

    def test_end_before_start_is_clamped(self):
        token = token_from_event({"text": "a", "start_ms": 500, "end_ms": 100})

        assert token.end_time == token.start_time == 0.5

    def test_string_false_stays_provisional(self):
        token = token_from_event({"text": "bal", "start_ms": 0, "end_ms": 100, "is_final": "false"})

        assert token.is_final is False
        assert token.id.endswith("-p")

    def test_fractional_milliseconds_are_accepted(self):
        token = token_from_event({"text": "bal", "start_ms": "1500.5", "end_ms": 2000.9, "is_final": True})

        assert token.start_time == 1.5
        assert token.end_time == 2.0

    def test_confidence_is_clamped(self):
        token = token_from_event({"text": "a", "start_ms": 0, "end_ms": 1, "confidence": 4})

        assert token.confidence == 1.0

    @pytest.mark.parametrize("event", [
        {"text": "   ", "start_ms": 0, "end_ms": 1},
        {"start_ms": 0, "end_ms": 1},
        {"text": "a", "start_ms": "soon", "end_ms": 1},
        {"text": "a", "start_ms": float("nan"), "end_ms": 1},
        {"text": "a", "start_ms": float("inf"), "end_ms": 1},
        "not a mapping",
        None,
    ])
    def test_unusable_events_return_none(self, event):
        assert token_from_event(event) is None


class TestApplyResult:
    """Test merging of recognition results."""

    def test_duplicate_final_batch_is_idempotent(self):
        aggregator = TranscriptAggregator()
        batch = [tok("aaj", 0.0), tok("hum", 0.6), tok("padhenge", 1.2)]

        aggregator.apply_result(batch)
        once = aggregator.final_count
        aggregator.apply_result(batch)

        assert aggregator.final_count == once == 3

    def test_jittered_final_is_deduplicated(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("newton", 10.0)])
        aggregator.apply_result([tok("newton", 10.3)])

        assert aggregator.final_count == 1
        assert aggregator.snapshot()[0].start_time == 10.0

    def test_same_text_outside_tolerance_is_kept(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("force", 10.0)])
        aggregator.apply_result([tok("force", 10.5)])

        assert aggregator.final_count == 2

    def test_duplicates_within_one_batch_are_collapsed(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("ma", 3.0), tok("ma", 3.1)])

        assert aggregator.final_count == 1

    def test_finals_never_shrink(self):
        aggregator = TranscriptAggregator()
        batches = [
            [tok("F", 0.0), tok("equals", 0.5, is_final=False)],
            [tok("equals", 0.5), tok("m", 1.0, is_final=False)],
            [tok("m", 1.0), tok("a", 1.5)],
            [tok("a", 1.6, is_final=False)],
        ]
        previous = set()

        for batch in batches:
            aggregator.apply_result(batch)
            finals = {t.id for t in aggregator.snapshot() if t.is_final}
            assert previous <= finals
            previous = finals

        assert aggregator.final_count == 4

    def test_provisional_tokens_are_replaced_each_result(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("tvaran", 2.0, is_final=False)])
        aggregator.apply_result([tok("tvaran hota", 2.0, is_final=False)])

        texts = [t.text for t in aggregator.snapshot()]
        assert texts == ["tvaran hota"]

    def test_result_without_provisional_clears_overlay(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("bal", 0.0), tok("dravyaman", 0.5, is_final=False)])
        aggregator.apply_result([tok("dravyaman", 0.5)])

        assert all(t.is_final for t in aggregator.snapshot())
        assert aggregator.token_count == 2

    def test_empty_batch_is_noop(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("bal", 0.0), tok("hai", 0.5, is_final=False)])
        before = aggregator.snapshot()

        assert aggregator.apply_result([]) == 2
        assert aggregator.apply_result(None) == 2
        assert aggregator.snapshot() == before

    def test_blank_tokens_are_dropped(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("  ", 0.0), tok("", 1.0, is_final=False), tok("ok", 2.0)])

        assert [t.text for t in aggregator.snapshot()] == ["ok"]

    def test_tokens_sorted_by_start_time(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("c", 3.0), tok("a", 1.0)])
        aggregator.apply_result([tok("b", 2.0), tok("d", 4.0, is_final=False)])

        starts = [t.start_time for t in aggregator.snapshot()]
        assert starts == sorted(starts)
        assert transcript_text(aggregator.snapshot()) == "a b c d"

    def test_ties_keep_arrival_order(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("pehla", 5.0)])
        aggregator.apply_result([tok("doosra", 5.0), tok("teesra", 5.0, is_final=False)])

        assert [t.text for t in aggregator.snapshot()] == ["pehla", "doosra", "teesra"]

    def test_apply_events_drops_malformed(self):
        aggregator = TranscriptAggregator()
        count = aggregator.apply_events([
            {"text": "sutra", "start_ms": 0, "end_ms": 400, "is_final": True},
            {"text": "", "start_ms": 400, "end_ms": 500},
            {"text": "x", "start_ms": None, "end_ms": "bad"},
            42,
        ])

        assert count == 1

    def test_apply_events_all_malformed_is_noop(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("hai", 0.0, is_final=False)])

        aggregator.apply_events([{"text": ""}, "garbage"])

        assert aggregator.token_count == 1

    def test_clear(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("a", 0.0), tok("b", 1.0, is_final=False)])

        aggregator.clear()

        assert aggregator.token_count == 0
        assert list(aggregator.to_sentences()) == []

    def test_snapshot_is_not_mutated_by_later_updates(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("a", 0.0)])
        snapshot = aggregator.snapshot()

        aggregator.apply_result([tok("b", 1.0)])

        assert len(snapshot) == 1
        assert aggregator.token_count == 2


class TestRecentWindow:
    """Test time-bounded and count-bounded views."""

    def test_window_boundary(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("zero", 0.0), tok("hundred", 100.0), tok("two hundred", 200.0)])

        window = aggregator.recent_window(reference_time=205, horizon_seconds=120)

        assert [t.start_time for t in window] == [100.0, 200.0]

    def test_window_includes_exact_horizon(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("edge", 80.0), tok("now", 200.0)])

        window = aggregator.recent_window(reference_time=200, horizon_seconds=120)

        assert [t.text for t in window] == ["edge", "now"]

    def test_recent_tokens_returns_last_twenty(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok(f"w{i}", float(i)) for i in range(30)])

        recent = aggregator.recent_tokens()

        assert len(recent) == 20
        assert recent[0].text == "w10"
        assert recent[-1].text == "w29"

    def test_recent_tokens_zero(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("a", 0.0)])

        assert aggregator.recent_tokens(0) == []


class TestSentences:
    """Test sentence segmentation."""

    def test_devanagari_terminator_closes_sentence(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("नमस्ते", 0.0, 1.0), tok("बच्चों।", 1.0, 2.0)])

        sentences = list(aggregator.to_sentences())

        assert len(sentences) == 1
        assert sentences[0].text == "नमस्ते बच्चों।"
        assert sentences[0].start_time == 0.0
        assert sentences[0].end_time == 2.0
        assert sentences[0].boundary == BOUNDARY_PUNCTUATION
        assert sentences[0].is_closed

    def test_latin_terminators(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([
            tok("Force", 0.0, 0.4), tok("is", 0.4, 0.6), tok("push.", 0.6, 1.0),
            tok("Clear?", 1.0, 1.5),
        ])

        texts = [s.text for s in aggregator.to_sentences()]

        assert texts == ["Force is push.", "Clear?"]

    def test_long_pause_closes_sentence(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("pehla", 0.0, 1.0), tok("doosra", 3.5, 4.0)])

        sentences = list(aggregator.to_sentences())

        assert sentences[0].text == "pehla"
        assert sentences[0].boundary == BOUNDARY_PAUSE
        assert sentences[1].boundary == BOUNDARY_END_OF_STREAM

    def test_two_second_gap_does_not_close(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("a", 0.0, 1.0), tok("b", 3.0, 3.5)])

        assert [s.text for s in aggregator.to_sentences()] == ["a b"]

    def test_trailing_provisional_is_open_sentence(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([
            tok("Newton", 0.0, 0.5), tok("ka", 0.5, 0.8, is_final=False),
        ])

        sentences = list(aggregator.to_sentences())

        assert len(sentences) == 1
        assert sentences[0].text == "Newton ka"
        assert sentences[0].is_final is False
        assert sentences[0].boundary == BOUNDARY_OPEN

    def test_sentences_are_recomputed_on_each_call(self):
        aggregator = TranscriptAggregator()
        aggregator.apply_result([tok("a", 0.0, is_final=False)])
        first = list(aggregator.to_sentences())

        aggregator.apply_result([tok("a.", 0.0)])
        second = list(aggregator.to_sentences())

        assert first[0].boundary == BOUNDARY_OPEN
        assert second[0].boundary == BOUNDARY_PUNCTUATION
        assert list(aggregator.to_sentences()) == second
