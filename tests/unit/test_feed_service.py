"""
Unit tests for the feed query service.

Covers pagination arithmetic, conjunctive filters, ordering and the
translation of store failures.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import StoreUnavailableError
from app.modules.feed.schemas.feed import FeedFilters
from app.modules.feed.services.feed import MAX_PAGE, build_filters, clamp_pagination, list_posts
from tests.utils import make_post


class TestClampPagination:
    @pytest.mark.parametrize(
        "page, limit, expected",
        [
            (None, None, (1, 10)),
            ("2", "5", (2, 5)),
            ("0", "-3", (1, 10)),
            ("abc", "x", (1, 10)),
            (3, 500, (3, 50)),
            (str(10 ** 30), None, (MAX_PAGE, 10)),
        ],
    )
    def test_values(self, page, limit, expected):
        assert clamp_pagination(page, limit) == expected


class TestBuildFilters:
    def test_blank_values_are_dropped(self):
        filters = build_filters(search="  ", tags=" , ", author="", location=None)
        assert filters == FeedFilters()

    def test_category_joins_tags(self):
        filters = build_filters(tags="fintech, seed", category="ai")
        assert filters.tags == ["fintech", "seed", "ai"]

    def test_category_not_duplicated(self):
        assert build_filters(tags="ai", category="ai").tags == ["ai"]


class TestListPosts:
    def test_pagination_last_page_and_beyond(self, db, founder, timeline):
        for i in range(7):
            make_post(db, founder, title=f"Post {i}", created_at=timeline[i])

        first = list_posts(db, FeedFilters(), page=1, limit=3)
        assert first.pagination.total == 3
        assert first.pagination.total_items == 7
        assert first.pagination.count == 3
        assert first.pagination.has_more is True

        last = list_posts(db, FeedFilters(), page=3, limit=3)
        assert last.pagination.count == 1
        assert last.pagination.has_more is False

        beyond = list_posts(db, FeedFilters(), page=4, limit=3)
        assert beyond.posts == []
        assert beyond.pagination.count == 0
        assert beyond.pagination.has_more is False

    def test_page_far_past_the_end_skips_the_fetch(self, db, founder):
        make_post(db, founder)
        result = list_posts(db, FeedFilters(), page=10 ** 30, limit=10)
        assert result.posts == []
        assert result.pagination.count == 0
        assert result.pagination.has_more is False

    def test_full_last_page(self, db, founder, timeline):
        for i in range(6):
            make_post(db, founder, created_at=timeline[i])
        assert len(list_posts(db, FeedFilters(), page=2, limit=3).posts) == 3

    def test_empty_store(self, db):
        result = list_posts(db, FeedFilters())
        assert result.posts == []
        assert result.pagination.total == 0
        assert result.pagination.has_more is False

    def test_newest_first_with_id_tie_break(self, db, founder, timeline):
        older = make_post(db, founder, title="older", created_at=timeline[0])
        newer = make_post(db, founder, title="newer", created_at=timeline[5])
        twin_a = make_post(db, founder, title="twin a", created_at=timeline[3])
        twin_b = make_post(db, founder, title="twin b", created_at=timeline[3])

        ids = [post.id for post in list_posts(db, FeedFilters()).posts]
        twins = sorted([twin_a.id, twin_b.id], reverse=True)
        assert ids == [newer.id, *twins, older.id]

    def test_search_matches_title_content_or_tag(self, db, founder, timeline):
        by_title = make_post(db, founder, title="Alpha launch", created_at=timeline[0])
        by_content = make_post(db, founder, content="the ALPHA cohort", created_at=timeline[1])
        by_tag = make_post(db, founder, tags=["alphabet"], created_at=timeline[2])
        make_post(db, founder, title="Beta", content="nothing", created_at=timeline[3])

        found = {post.id for post in list_posts(db, FeedFilters(search="alpha")).posts}
        assert found == {by_title.id, by_content.id, by_tag.id}

    def test_search_wildcards_are_literal(self, db, founder, timeline):
        literal = make_post(db, founder, title="100% growth", created_at=timeline[0])
        make_post(db, founder, title="100 users", created_at=timeline[1])

        found = [post.id for post in list_posts(db, FeedFilters(search="100%")).posts]
        assert found == [literal.id]

    def test_tags_match_any_listed_tag(self, db, founder, timeline):
        fintech = make_post(db, founder, tags="fintech", created_at=timeline[0])
        seed = make_post(db, founder, tags="seed", created_at=timeline[1])
        make_post(db, founder, tags="biotech", created_at=timeline[2])

        found = {post.id for post in list_posts(db, FeedFilters(tags=["fintech", "seed"])).posts}
        assert found == {fintech.id, seed.id}

    def test_filters_are_conjunctive(self, db, founder, timeline):
        both = make_post(db, founder, title="alpha deal", tags="x", created_at=timeline[0])
        make_post(db, founder, title="alpha only", tags="y", created_at=timeline[1])
        make_post(db, founder, title="tag only", tags="x", created_at=timeline[2])

        found = [post.id for post in list_posts(db, FeedFilters(search="alpha", tags=["x"])).posts]
        assert found == [both.id]

    def test_author_filter(self, db, founder, investor, timeline):
        mine = make_post(db, founder, created_at=timeline[0])
        make_post(db, investor, created_at=timeline[1])

        found = [post.id for post in list_posts(db, FeedFilters(author=founder.id)).posts]
        assert found == [mine.id]

    def test_location_filter_matches_address(self, db, founder, timeline):
        nyc = make_post(
            db, founder, latitude=40.71, longitude=-74.0, address="New York, USA", created_at=timeline[0]
        )
        make_post(db, founder, latitude=51.5, longitude=-0.12, address="London", created_at=timeline[1])
        make_post(db, founder, created_at=timeline[2])

        found = [post.id for post in list_posts(db, FeedFilters(location="new york")).posts]
        assert found == [nyc.id]

    def test_wire_shape(self, db, founder):
        make_post(db, founder, title="Seed Round", content="Raising $2M", tags="fintech, seed")
        post = list_posts(db, FeedFilters()).posts[0]
        assert post.tags == ["fintech", "seed"]
        assert post.like_count == 0
        assert post.comment_count == 0
        assert post.location is None
        assert post.author.display_name == "Ada Lovelace"

    def test_store_failure_is_translated(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("database is down"))

        with pytest.raises(StoreUnavailableError):
            list_posts(db, FeedFilters())
