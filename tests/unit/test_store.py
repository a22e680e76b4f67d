"""Unit tests for the article store."""

from crypto_news_feed.core.store import ArticleStore


class TestArticleStoreMerge:
    """Tests for ArticleStore.merge."""

    def test_empty_store(self):
        store = ArticleStore()

        assert store.is_empty
        assert len(store) == 0
        assert store.articles == ()

    def test_merge_returns_added_count(self, make_article):
        store = ArticleStore()

        added = store.merge([make_article("Alpha story"), make_article("Beta story")])

        assert added == 2
        assert len(store) == 2
        assert not store.is_empty

    def test_same_payload_twice_adds_once(self, make_article):
        store = ArticleStore()

        assert store.merge([make_article("Alpha story")]) == 1
        assert store.merge([make_article("Alpha story")]) == 0
        assert len(store) == 1

    def test_duplicate_link_with_different_title(self, make_article):
        store = ArticleStore()
        first = make_article("Original headline", link="https://example.com/shared")
        second = make_article("Edited headline", link="https://example.com/shared")

        store.merge([first])
        added = store.merge([second])

        assert added == 0
        assert store.articles == (first,)

    def test_duplicate_id_with_different_link(self, make_article):
        store = ArticleStore()
        first = make_article("Alpha story", link="https://example.com/one")
        clash = first.model_copy(update={"link": "https://example.com/two"})

        store.merge([first])

        assert store.merge([clash]) == 0
        assert store.articles[0].link == "https://example.com/one"

    def test_first_seen_wins_within_batch(self, make_article):
        store = ArticleStore()
        first = make_article("Alpha story", link="https://example.com/a", description="old")
        later = make_article("Alpha copy", link="https://example.com/a", description="new")

        added = store.merge([first, later])

        assert added == 1
        assert store.articles[0].description == "old"

    def test_later_copy_does_not_update(self, make_article):
        store = ArticleStore()
        store.merge([make_article("Alpha story", description="v1", age_minutes=30)])

        store.merge([make_article("Alpha story", description="v2", age_minutes=0)])

        assert store.articles[0].description == "v1"

    def test_sorted_newest_first(self, make_article):
        store = ArticleStore()

        store.merge([
            make_article("Old story", age_minutes=60),
            make_article("New story", age_minutes=0),
            make_article("Mid story", age_minutes=30),
        ])

        assert [a.title for a in store] == ["New story", "Mid story", "Old story"]

    def test_older_batch_keeps_newer_order(self, make_article):
        store = ArticleStore()
        store.merge([make_article("Newest", age_minutes=1), make_article("Newer", age_minutes=5)])

        store.merge([make_article("Ancient", age_minutes=600), make_article("Old", age_minutes=300)])

        assert [a.title for a in store] == ["Newest", "Newer", "Old", "Ancient"]

    def test_interleaves_batches_by_date(self, make_article):
        store = ArticleStore()
        store.merge([make_article("Ten", age_minutes=10), make_article("Thirty", age_minutes=30)])

        store.merge([make_article("Twenty", age_minutes=20)])

        assert [a.title for a in store] == ["Ten", "Twenty", "Thirty"]

    def test_ties_keep_insertion_order(self, make_article):
        store = ArticleStore()

        store.merge([make_article("First tie"), make_article("Second tie")])
        store.merge([make_article("Third tie")])

        assert [a.title for a in store] == ["First tie", "Second tie", "Third tie"]

    def test_empty_merge(self, make_article):
        store = ArticleStore()
        store.merge([make_article("Alpha story")])

        assert store.merge([]) == 0
        assert len(store) == 1


class TestArticleStoreAccessors:
    """Tests for read-only accessors."""

    def test_articles_is_snapshot(self, make_article):
        store = ArticleStore()
        store.merge([make_article("Alpha story")])

        snapshot = store.articles
        store.merge([make_article("Beta story")])

        assert len(snapshot) == 1
        assert len(store.articles) == 2

    def test_contains(self, make_article):
        store = ArticleStore()
        article = make_article("Alpha story")
        store.merge([article])

        assert store.contains(article)
        assert not store.contains(make_article("Gamma story"))

    def test_sources(self, make_article):
        store = ArticleStore()
        store.merge([
            make_article("Alpha story", source_name="CoinDesk"),
            make_article("Beta story", source_name="CoinDesk"),
            make_article("Gamma story", source_name="NewsBTC"),
        ])

        assert store.sources() == {"CoinDesk": 2, "NewsBTC": 1}
