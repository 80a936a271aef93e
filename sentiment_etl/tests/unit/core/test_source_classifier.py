import pytest

from sentiment_etl.core.source_classifier import classify_source, normalize_source_label
from sentiment_etl.models.categories import SourceCategory


@pytest.mark.parametrize("fields, url, expected", [
    ({"article_id": "a1", "namakanal": "Nasional"}, None, SourceCategory.REALTIME_NEWS),
    ({"source_name": "Kompas.com", "idberita": "1"}, None, SourceCategory.REALTIME_NEWS),
    ({"namakanal": "Nasional", "source": "Reuters"}, None, SourceCategory.INDONESIA_NEWS),
    ({"idberita": "123"}, "https://www.youtube.com/watch?v=x", SourceCategory.INDONESIA_NEWS),
    ({"source": "Kompas"}, None, SourceCategory.INDONESIA_NEWS),
    ({"source": {"name": "Instagram Official"}}, None, SourceCategory.INSTAGRAM),
    ({"source": "YouTube"}, None, SourceCategory.YOUTUBE),
    ({"namaparent": "Berita"}, None, SourceCategory.INDONESIA_NEWS),
    ({}, "https://news.detik.com/berita/d-1", SourceCategory.INDONESIA_NEWS),
    ({}, "https://youtu.be/abc", SourceCategory.YOUTUBE),
    ({}, "https://www.instagram.com/p/xyz", SourceCategory.INSTAGRAM),
    ({}, "https://example.org/story", SourceCategory.NEWS),
    ({}, None, SourceCategory.NEWS),
])
def test_classification_rules(fields, url, expected, lexicon):
    assert classify_source(fields, url, lexicon) == expected


def test_explicit_source_ends_rule_battery(lexicon):
    # The URL would say Indonesia News, but an explicit unknown source wins.
    fields = {"source": "Reuters", "namasubkanal": "Sains"}
    assert classify_source(fields, "https://www.kompas.com/a", lexicon) == SourceCategory.NEWS


def test_blank_explicit_source_falls_through(lexicon):
    assert classify_source({"source": "  "}, "https://tempo.co/read/1", lexicon) == SourceCategory.INDONESIA_NEWS


@pytest.mark.parametrize("label, expected", [
    ("Real-Time News", SourceCategory.REALTIME_NEWS),
    ("indonesia_news", SourceCategory.INDONESIA_NEWS),
    ("detikcom", SourceCategory.INDONESIA_NEWS),
    ("CNN Indonesia", SourceCategory.INDONESIA_NEWS),
    ("Some Indonesia Daily", SourceCategory.INDONESIA_NEWS),
    ("BBC", SourceCategory.NEWS),
])
def test_normalize_source_label(label, expected, lexicon):
    assert normalize_source_label(label, lexicon) == expected
