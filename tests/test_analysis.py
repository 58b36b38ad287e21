import pytest

from prose_feedback.analysis import (
    analyze,
    analyze_sentence,
    group_issues,
    issues_changed,
    _round_tenth,
    readability_band,
)
from prose_feedback.config import AnalyzerSettings
from prose_feedback.models import AnalysisResult, Issue

SCENARIO = (
    "She quickly finished the extraordinarily complicated assignment that was "
    "written by someone else entirely without any real understanding of the "
    "material whatsoever, which was unfortunately typical."
)


def _sentence(word_count: int) -> str:
    return " ".join(["word"] * word_count) + "."


def _types(result: AnalysisResult, issue_type: str) -> list[Issue]:
    return [issue for issue in result.issues if issue.type == issue_type]


@pytest.mark.parametrize("text", ["", "   ", "\n\n\t"])
def test_blank_input_yields_zero_result(text: str):
    result = analyze(text)
    assert result == AnalysisResult()
    assert result.word_count == result.sentence_count == result.paragraph_count == 0
    assert result.score == 0
    assert result.issues == ()


def test_non_text_input_degrades_to_zero():
    assert analyze(None) == AnalysisResult()
    assert analyze(42) == AnalysisResult()


@pytest.mark.parametrize(
    "text",
    ["a", "!!!", "The cat sat.", SCENARIO, SCENARIO * 5, "incomprehensibility " * 40],
)
def test_scores_stay_in_range(text: str):
    result = analyze(text)
    assert 0 <= result.score <= 100
    assert 0.0 <= result.flesch_score <= 100.0
    assert result.grade_level >= 0


def test_basic_counts():
    text = "The cat sat. The dog ran.\n\nA new paragraph here!"
    result = analyze(text)
    assert result.char_count == len(text)
    assert result.word_count == 10
    assert result.sentence_count == 3
    assert result.paragraph_count == 2
    assert result.reading_time == pytest.approx(10 / 250)


def test_short_words_cap_flesch_and_floor_grade():
    result = analyze("The cat sat. The dog ran.")
    assert result.flesch_score == 100.0
    assert result.grade_level == 0
    assert result.score == 100


def test_adverb_exceptions_are_not_flagged():
    assert _types(analyze("My family is here."), "adverb") == []
    assert _types(analyze("Only the family will reply to July."), "adverb") == []


def test_adverbs_and_score_penalty():
    result = analyze("He ran quickly, slowly, badly, sadly and happily.")
    adverbs = _types(result, "adverb")
    assert [issue.text for issue in adverbs] == [
        "quickly",
        "slowly",
        "badly",
        "sadly",
        "happily",
    ]
    assert adverbs[0].suggestion == "Try a stronger verb"
    # (5 - 2) * 2 for adverbs plus 1/8 * 15 for "happily".
    assert result.score == 92


def test_passive_voice_span():
    text = "The report was written by the team."
    result = analyze(text)
    passive = _types(result, "passive")
    assert len(passive) == 1
    assert passive[0].text == "was written"
    assert text[passive[0].index : passive[0].end] == "was written"


def test_passive_voice_across_no_break_space():
    text = "The report was\u00a0written by them."
    passive = _types(analyze(text), "passive")
    assert [issue.text for issue in passive] == ["was\u00a0written"]
    assert passive[0].index == text.index("was")


def test_flesch_rounds_halves_up():
    assert _round_tenth(0.25) == 0.3
    assert _round_tenth(2.25) == 2.3
    assert _round_tenth(100.0) == 100.0


def test_sentence_length_boundaries():
    assert _types(analyze(_sentence(25)), "complex") == []
    assert _types(analyze(_sentence(25)), "veryComplex") == []

    complex_issues = _types(analyze(_sentence(26)), "complex")
    assert len(complex_issues) == 1
    assert complex_issues[0].index == 0
    assert complex_issues[0].length == len(_sentence(26))

    assert _types(analyze(_sentence(35)), "veryComplex") == []
    very = _types(analyze(_sentence(36)), "veryComplex")
    assert len(very) == 1
    assert _types(analyze(_sentence(36)), "complex") == []


def test_sentence_offsets_respect_line_breaks():
    long_sentence = _sentence(26)
    text = "Short line.\n" + long_sentence
    issue = _types(analyze(text), "complex")[0]
    assert issue.index == len("Short line.\n")
    assert text[issue.index : issue.end] == long_sentence


def test_unterminated_line_is_not_a_sentence():
    result = analyze(" ".join(["word"] * 30))
    assert _types(result, "complex") == []
    assert result.score == 100


def test_long_heading_is_not_flagged():
    heading = "# " + " ".join(["word"] * 40)
    result = analyze(f"{heading}\n\nShort one.")
    assert [issue.type for issue in result.issues if issue.index == 0] == []


def test_sentence_never_spans_lines():
    words = " ".join(["word"] * 20)
    result = analyze(f"{words}\n{words}.")
    assert _types(result, "complex") == []


def test_qualifier_is_phrase_bounded():
    result = analyze("I think this works")
    qualifiers = _types(result, "qualifier")
    assert len(qualifiers) == 1
    assert qualifiers[0].index == 0
    assert qualifiers[0].length == len("I think")
    assert qualifiers[0].text == "I think"


def test_qualifier_requires_word_boundaries():
    assert _types(analyze("The abit of maybelline."), "qualifier") == []


def test_issue_order_follows_detection_passes():
    result = analyze("Maybe it was finished quickly.")
    assert [issue.type for issue in result.issues] == ["adverb", "passive", "qualifier"]


def test_end_to_end_scenario():
    result = analyze(SCENARIO)
    assert "quickly" in [issue.text for issue in _types(result, "adverb")]
    hard_words = [issue.text for issue in _types(result, "hardWord")]
    assert "extraordinarily" in hard_words or "complicated" in hard_words
    assert [issue.text for issue in _types(result, "passive")] == ["was written"]

    sentence_issues = [
        issue for issue in result.issues if issue.type in {"complex", "veryComplex"}
    ]
    assert len(sentence_issues) == 1
    assert sentence_issues[0].index == 0
    assert sentence_issues[0].length == len(SCENARIO)
    # 26 words is past the complex limit but under the very-complex one, so
    # the thresholds classify this sentence as complex.
    assert analyze_sentence(SCENARIO).word_count == 26
    assert sentence_issues[0].type == "complex"


def test_settings_override_thresholds():
    settings = AnalyzerSettings(complex_sentence_words=5, very_complex_sentence_words=8)
    result = analyze(_sentence(6), settings)
    assert len(_types(result, "complex")) == 1


def test_analyze_is_deterministic():
    assert analyze(SCENARIO) == analyze(SCENARIO)


def test_readability_band_thresholds():
    assert readability_band(100) == "Good Readability"
    assert readability_band(80) == "Needs Improvement"
    assert readability_band(51) == "Needs Improvement"
    assert readability_band(50) == "Hard to Read"


def test_group_issues_preserves_type_order():
    grouped = group_issues(analyze("Maybe it was finished quickly.").issues)
    assert list(grouped) == ["adverb", "passive", "qualifier"]


def test_issues_changed_compares_type_offset_and_length():
    a = [Issue("adverb", 3, 7, "quickly")]
    assert issues_changed(None, a)
    assert not issues_changed(a, [Issue("adverb", 3, 7, "QUICKLY")])
    assert issues_changed(a, [Issue("adverb", 4, 7, "quickly")])
    assert issues_changed(a, [Issue("qualifier", 3, 7, "quickly")])
    assert not issues_changed(a, [*a, Issue("complex", 0, 40, "x")], types={"adverb"})
