import pytest

from sentiment_etl.core.id_generator import IdentifierGenerator
from sentiment_etl.core.transformer import RecordTransformer
from sentiment_etl.models.categories import SourceCategory
from sentiment_etl.models.dtos import ExtractionBatch, RawItem, SourceExtraction


def news_item(**overrides):
    payload = {
        "title": "Vaksin COVID-19 berhasil dan efektif",
        "link": "https://example.com/a",
        "snippet": "Program vaksinasi di Jakarta",
        "article_id": "abc",
        "published_datetime_utc": "2024-03-01T10:00:00.000Z",
    }
    payload.update(overrides)
    return RawItem(source="realtime_news", payload=payload)


def instagram_item():
    return RawItem(source="instagram", payload={
        "code": "ABC123",
        "caption_text": "Tetap pakai mask dan jaga jarak",
        "user": {"username": "dinkes"},
        "like_count": 10,
        "comment_count": 2,
        "taken_at": 1700000000,
    })


def youtube_comment_item():
    return RawItem(source="youtube", payload={
        "comment": {
            "commentId": "c1",
            "content": "Semoga cepat sembuh semua",
            "author": {"title": "@warga"},
            "stats": {"votes": 5, "replies": 1},
        },
        "video": {"videoId": "vid1", "title": "Update COVID-19", "url": "https://www.youtube.com/watch?v=vid1"},
    })


@pytest.fixture
def transformer(lexicon):
    return RecordTransformer(lexicon=lexicon)


def test_news_item_end_to_end(transformer):
    record = transformer.transform_item(news_item())

    assert record.id.startswith("article_")
    assert record.source_category == SourceCategory.REALTIME_NEWS
    assert record.title == "Vaksin COVID-19 berhasil dan efektif"
    assert record.description == "Program vaksinasi di Jakarta"
    assert record.content == record.description
    assert record.url == "https://example.com/a"
    assert record.sentiment == "positive"
    assert record.sentiment_score > 0
    assert record.relevance_score > 0
    assert record.language == "id"
    assert record.published_at.year == 2024
    assert set(record.sentiment_keywords) == {"Vaksin", "berhasil", "efektif"}


def test_news_item_attributed_to_indonesia_news(transformer):
    item = RawItem(source="indonesia_news", payload={
        "title": "Kasus COVID di Jawa menurun",
        "namakanal": "Nasional",
        "url": "https://www.kompas.com/read/1",
    })
    record = transformer.transform_item(item)
    assert record.source_category == SourceCategory.INDONESIA_NEWS


def test_instagram_post(transformer):
    record = transformer.transform_item(instagram_item())

    assert record.id.startswith("instagram_")
    assert record.source_category == SourceCategory.INSTAGRAM
    assert record.title == "Instagram Post by @dinkes"
    assert record.description == "Tetap pakai mask dan jaga jarak (Likes: 10, Comments: 2)"
    assert record.content == "Tetap pakai mask dan jaga jarak"
    assert record.url == "https://instagram.com/p/ABC123"
    assert record.author == "dinkes"
    assert record.published_at is not None


def test_youtube_comment(transformer):
    record = transformer.transform_item(youtube_comment_item())

    assert record.id.startswith("comment_")
    assert record.source_category == SourceCategory.YOUTUBE
    assert record.title == "Update COVID-19"
    assert record.content == "Semoga cepat sembuh semua"
    assert record.url == "https://www.youtube.com/watch?v=vid1"
    assert record.author == "@warga"
    assert record.sentiment == "positive"
    assert record.metadata["comment"]["votes"] == 5
    assert record.metadata["video"]["video_id"] == "vid1"


@pytest.mark.parametrize("item", [
    RawItem(source="youtube", payload={"foo": 1}),
    RawItem(source="instagram", payload={"user": {"username": "x"}}),
    RawItem(source="realtime_news", payload={"url": "https://example.com"}),
])
def test_items_without_usable_text_are_skipped(transformer, item):
    assert transformer.transform_item(item) is None


def test_transform_batch_skips_failed_sources_and_bad_items(transformer):
    batch = ExtractionBatch(query="COVID-19", sources={
        "youtube": SourceExtraction.failed("youtube", "HTTP 500: Internal Server Error"),
        "realtime_news": SourceExtraction(source="realtime_news", items=[news_item(), news_item(title="")]),
        "instagram": SourceExtraction(source="instagram", items=[
            instagram_item(),
            RawItem(source="instagram", payload={"unexpected": True}),
        ]),
    })

    records = transformer.transform(batch)

    # The second news item still has a snippet, so only the malformed Instagram item is dropped.
    assert len(records) == 3
    assert [r.source_category for r in records] == [
        SourceCategory.REALTIME_NEWS,
        SourceCategory.REALTIME_NEWS,
        SourceCategory.INSTAGRAM,
    ]
    assert len({r.id for r in records}) == 3


def test_identical_items_get_distinct_ids(lexicon):
    transformer = RecordTransformer(lexicon=lexicon, id_generator=IdentifierGenerator())
    first = transformer.transform_item(news_item())
    second = transformer.transform_item(news_item())
    assert first.id != second.id


def test_summarize(transformer):
    records = [transformer.transform_item(news_item()), transformer.transform_item(instagram_item())]
    summary = RecordTransformer.summarize(records, skipped_items=1)

    assert summary.total_records == 2
    assert summary.by_category == {"Real-Time News": 1, "Instagram": 1}
    assert summary.skipped_items == 1
    assert 0 < summary.average_relevance <= 1


def test_summarize_empty():
    summary = RecordTransformer.summarize([], skipped_items=4)
    assert summary.total_records == 0
    assert summary.skipped_items == 4


def test_instagram_scores_caption_only(transformer):
    item = RawItem(source="instagram", payload={
        "code": "EN1",
        "caption_text": "Stay safe everyone",
        "user": {"username": "who"},
        "like_count": 5,
        "comment_count": 0,
    })

    record = transformer.transform_item(item)

    # The engagement suffix and synthetic title stay out of scoring ("Likes" contains "ke").
    assert record.description == "Stay safe everyone (Likes: 5, Comments: 0)"
    assert record.language == "en"
    assert record.word_count == 3


def test_youtube_comment_text_counted_once(transformer):
    item = RawItem(source="youtube", payload={
        "comment": {"commentId": "c2", "content": "one two three four"},
        "video": {"videoId": "vid2", "title": ""},
    })

    record = transformer.transform_item(item)

    assert record.description == record.content == "one two three four"
    assert record.word_count == 4


def test_youtube_comment_keywords_not_duplicated(transformer):
    record = transformer.transform_item(youtube_comment_item())

    assert record.word_count == 6
    assert len(record.sentiment_keywords) == len(set(record.sentiment_keywords))


def test_news_snippet_fallback_counted_once(transformer):
    record = transformer.transform_item(news_item(title="", snippet="Kasus baru di Jakarta"))

    assert record.content == record.description
    assert record.word_count == 4
