import pytest

from sentiment_etl.core.sentiment_scorer import (
    NEGATIVE_THRESHOLD,
    POSITIVE_THRESHOLD,
    SentimentScorer,
    tokenize,
)


@pytest.fixture
def scorer(lexicon):
    return SentimentScorer(lexicon)


def test_tokenize_splits_on_punctuation_and_drops_single_chars():
    assert tokenize("vaksin COVID-19, berhasil! a b") == ["vaksin", "COVID", "19", "berhasil"]


def test_empty_text_is_neutral(scorer):
    result = scorer.score("")
    assert result.category == "neutral"
    assert result.score == 0.0
    assert result.confidence == 0.0
    assert result.matched_terms == []


def test_text_without_tokens_is_neutral(scorer):
    result = scorer.score("a b c !!")
    assert result.category == "neutral"
    assert result.score == 0.0
    assert result.confidence == 0.0


def test_indonesian_positive_text(scorer):
    result = scorer.score("vaksin COVID-19 berhasil dan efektif")
    # 3 positive terms (0.7 + 0.8 + 0.7) over 6 tokens
    assert result.category == "positive"
    assert result.score == pytest.approx(2.2 / 6)
    assert result.confidence == pytest.approx(0.5)
    assert result.matched_terms == ["vaksin", "berhasil", "efektif"]


def test_negative_text(scorer):
    result = scorer.score("wabah dan krisis")
    assert result.category == "negative"
    assert result.score == pytest.approx(-1.4 / 3)
    assert result.confidence == pytest.approx(2 / 3)


def test_neutral_terms_drive_neutral_confidence(scorer):
    result = scorer.score("laporan harian kasus")
    assert result.category == "neutral"
    assert result.score == 0.0
    assert result.confidence == pytest.approx(1.0)


def test_matching_is_case_insensitive_and_keeps_original_case(scorer):
    result = scorer.score("VAKSIN Berhasil")
    assert result.category == "positive"
    assert result.matched_terms == ["VAKSIN", "Berhasil"]


def test_small_scores_fall_in_dead_band(scorer):
    # 0.6 over 31 tokens stays under the positive threshold
    text = "better " + "kata " * 30
    result = scorer.score(text)
    assert 0 < result.score <= POSITIVE_THRESHOLD
    assert result.category == "neutral"


def test_opposing_terms_cancel_out(scorer):
    result = scorer.score("good bad")
    assert result.score == pytest.approx(0.0)
    assert result.category == "neutral"
    assert result.matched_terms == ["good", "bad"]


def test_multi_word_entries_never_match(scorer):
    result = scorer.score("luar biasa")
    assert result.matched_terms == []
    assert result.category == "neutral"


@pytest.mark.parametrize("text", [
    "death death death",
    "excellent amazing fantastic",
    "the pandemic was a disaster but recovery is good",
    "Pemerintah umumkan kasus baru, masyarakat khawatir namun optimis",
])
def test_scores_stay_within_bounds(scorer, text):
    result = scorer.score(text)
    assert -1.0 <= result.score <= 1.0
    assert 0.0 <= result.confidence <= 1.0
    if result.score > POSITIVE_THRESHOLD:
        assert result.category == "positive"
    elif result.score < NEGATIVE_THRESHOLD:
        assert result.category == "negative"
    else:
        assert result.category == "neutral"


def test_score_many_preserves_order(scorer):
    results = scorer.score_many(["sukses", "gagal", ""])
    assert [r.category for r in results] == ["positive", "negative", "neutral"]


def test_scoring_is_deterministic(scorer):
    text = "Vaksinasi di Jakarta berjalan baik meski ada kekhawatiran"
    assert scorer.score(text) == scorer.score(text)
