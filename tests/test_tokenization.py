from prose_feedback.tokenization import (
    split_paragraphs,
    split_sentences,
    syllable_count,
    tokenize_words,
)


def test_tokenize_words_returns_offsets():
    text = "Hello, world! It's sunny today."
    tokens = tokenize_words(text)

    assert [token.text for token in tokens] == ["Hello", "world", "It", "s", "sunny", "today"]
    assert tokens[0].start_char == 0
    assert tokens[0].end_char == 5
    assert text[tokens[-1].start_char : tokens[-1].end_char] == "today"


def test_split_sentences_drops_blank_fragments():
    assert split_sentences("One. Two!! Three?") == ["One", " Two", " Three"]
    assert split_sentences("...") == []


def test_split_paragraphs_on_blank_lines():
    text = "First para.\nStill first.\n\n\nSecond.\n  \nThird."
    assert split_paragraphs(text) == ["First para.\nStill first.", "Second.", "Third."]


def test_syllable_count_spot_checks():
    assert syllable_count("cat") == 1
    assert syllable_count("readability") >= 4
    assert syllable_count("happily") == 3
    assert syllable_count("quickly") == 2
    # Silent trailing "ed" and "e" are dropped before counting.
    assert syllable_count("complicated") == 3
    assert syllable_count("make") == 1


def test_syllable_count_ignores_case_and_punctuation():
    assert syllable_count("Extraordinarily") == syllable_count("extraordinarily")
    assert syllable_count("it's") == 1
    assert syllable_count("123") == 1
