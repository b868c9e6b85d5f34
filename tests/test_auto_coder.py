"""Tests for qualflow.pipeline.auto_coder."""

from __future__ import annotations

from qualflow.config import CodingConfig
from qualflow.pipeline.auto_coder import (
    code_applies,
    construct_codes,
    extract_gerunds,
    extract_in_vivo,
    generate_codes,
)


def _names(result) -> list:
    return [c.name for c in result.codes]


class TestGenerateCodes:
    def test_grounded_yields_in_vivo_and_gerund_codes(self) -> None:
        result = generate_codes(
            "I feel anxious about exams. Managing stress through meditation.",
            methodology="grounded",
        )
        by_name = {c.name: c for c in result.codes}
        assert by_name["feel-anxious"].type == "in_vivo"
        assert by_name["managing"].type == "constructed"
        assert by_name["managing"].definition == "Process/action: managing"
        assert result.summary.in_vivo_codes >= 1
        assert result.summary.constructed_codes >= 1

    def test_general_methodology_runs_grounded_and_thematic(self) -> None:
        result = generate_codes(
            "I feel really anxious about the upcoming exam. The stress is overwhelming."
        )
        names = _names(result)
        assert "feel-really" in names
        assert "emotion-anxious" in names
        assert "upcoming" in names
        assert "overwhelming" in names

    def test_grounded_only_skips_thematic_lexicons(self) -> None:
        result = generate_codes("I am anxious about this problem.", methodology="grounded")
        names = _names(result)
        assert "emotion-anxious" not in names
        assert "challenge-identified" not in names

    def test_thematic_detects_challenges_and_strategies(self) -> None:
        result = generate_codes(
            "It was difficult at first, but I found a way to handle it.",
            methodology="thematic",
        )
        names = _names(result)
        assert "challenge-identified" in names
        assert "coping-strategy" in names

    def test_phenomenology_detects_lived_experience(self) -> None:
        result = generate_codes(
            "The lived experience of anxiety is like being trapped",
            methodology="phenomenology",
        )
        assert "lived-experience" in _names(result)

    def test_existing_codes_reattach_by_name_part(self) -> None:
        result = generate_codes(
            "I am coping with stress by talking to friends",
            existing_codes=["stress-management", "social-support"],
            methodology="thematic",
        )
        by_name = {c.name: c for c in result.codes}
        assert "stress-management" in by_name
        assert by_name["stress-management"].definition == "Existing code from codebook"
        assert by_name["stress-management"].type == "constructed"
        assert "social-support" not in by_name

    def test_codes_fold_across_segments(self) -> None:
        result = generate_codes("I feel anxious.\n\nI feel anxious again.")
        by_name = {c.name: c for c in result.codes}
        assert by_name["feel-anxious"].frequency == 2
        assert len(by_name["feel-anxious"].examples) == 2
        assert result.summary.total_codes == 2
        assert result.summary.in_vivo_codes == 1
        assert result.summary.constructed_codes == 1
        assert result.summary.average_codes_per_segment == 2.0

    def test_code_attaches_once_per_segment(self) -> None:
        result = generate_codes("I feel anxious and I feel anxious.", methodology="grounded")
        by_name = {c.name: c for c in result.codes}
        assert by_name["feel-anxious"].frequency == 1
        assert result.segments[0].codes.count("feel-anxious") == 1

    def test_segments_keep_source_ranges(self) -> None:
        text = "I feel anxious.\n\nI feel anxious again."
        result = generate_codes(text)
        assert [s.start_index for s in result.segments] == [0, 17]
        for seg in result.segments:
            assert text[seg.start_index:seg.end_index] == seg.text

    def test_examples_truncated_to_100_chars(self) -> None:
        text = "challenge " + "x" * 290
        result = generate_codes(text, methodology="thematic")
        code = next(c for c in result.codes if c.name == "challenge-identified")
        assert all(len(ex) <= 100 for ex in code.examples)
        assert code.examples[0] == text[:100]

    def test_example_cap_is_configurable(self) -> None:
        conf = CodingConfig(max_examples_per_code=1)
        result = generate_codes("I feel anxious.\n\nI feel anxious again.", conf=conf)
        code = next(c for c in result.codes if c.name == "feel-anxious")
        assert code.frequency == 2
        assert len(code.examples) == 1

    def test_empty_text_returns_empty_result(self) -> None:
        result = generate_codes("")
        assert result.codes == []
        assert result.segments == []
        assert result.summary.total_codes == 0
        assert result.summary.average_codes_per_segment == 0

    def test_methodology_is_case_insensitive(self) -> None:
        result = generate_codes("Managing deadlines", methodology="Grounded Theory")
        assert "managing" in _names(result)

    def test_existing_names_list_not_mutated(self) -> None:
        existing = ["stress-management"]
        generate_codes("stress everywhere", existing_codes=existing)
        assert existing == ["stress-management"]


class TestInVivo:
    def test_quoted_phrase_becomes_code(self) -> None:
        codes = extract_in_vivo('She said "it was a total nightmare" yesterday.')
        assert codes[0].name == "it-was-a-total-nightmare"
        assert codes[0].type == "in_vivo"
        assert codes[0].definition == 'In-vivo code: "it was a total nightmare"'

    def test_quote_length_bounds(self) -> None:
        assert extract_in_vivo('"too short"') == []
        assert [c.name for c in extract_in_vivo('"abcdefghij"')] == ["abcdefghij"]
        long_quote = '"' + "a" * 50 + '"'
        assert extract_in_vivo(long_quote) == []

    def test_curly_quotes_are_recognised(self) -> None:
        codes = extract_in_vivo("He called it “a long dark tunnel” honestly.")
        assert codes[0].name == "a-long-dark-tunnel"

    def test_affect_verbs_pair_with_next_word(self) -> None:
        names = [c.name for c in extract_in_vivo("I THOUGHT everything would be fine; we believed nothing.")]
        assert names == ["thought-everything", "believed-nothing"]

    def test_affect_example_starts_at_match(self) -> None:
        codes = extract_in_vivo("Yesterday I felt lost in the crowd.")
        assert codes[0].examples[0].startswith("felt lost")


class TestConstructed:
    def test_gerunds_capped_then_filtered_by_length(self) -> None:
        text = "running sing being reading writing coding thinking walking running talking"
        assert extract_gerunds(text) == ["running", "reading", "writing"]

    def test_short_gerunds_use_up_slots(self) -> None:
        assert extract_gerunds("sing being thing king ring walking") == []

    def test_repeated_gerunds_take_one_slot(self) -> None:
        assert extract_gerunds("walking walking walking talking") == ["walking", "talking"]

    def test_relational_dynamics(self) -> None:
        names = [c.name for c in construct_codes("The connection between us", "grounded")]
        assert "relational-dynamics" in names

    def test_emotion_words_match_whole_words_only(self) -> None:
        names = [c.name for c in construct_codes("unhappy days", "thematic")]
        assert "emotion-happy" not in names

    def test_unknown_methodology_yields_no_constructed_codes(self) -> None:
        assert construct_codes("managing a difficult problem", "narrative") == []


class TestCodeApplies:
    def test_any_name_part_matches(self) -> None:
        assert code_applies("We talked about Coping a lot", "coping_strategies")

    def test_no_part_matches(self) -> None:
        assert not code_applies("nothing relevant", "social-support")
