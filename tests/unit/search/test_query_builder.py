"""
Unit tests for QueryBuilder and the query adapter.
"""

import pytest

from reading_recommender.errors import InvalidInputError
from reading_recommender.models.keywords import ContentCategory, KeywordSet
from reading_recommender.search.query_adapter import or_group, quote_term, to_filters, to_query_text
from reading_recommender.search.query_builder import CATEGORY_REFINEMENTS, QueryBuilder


@pytest.fixture
def builder() -> QueryBuilder:
    return QueryBuilder()


class TestQueryBuilder:
    """Test QuerySpec construction."""

    def test_any_of_is_main_topics(self, builder, transformers_keywords):
        spec = builder.build(transformers_keywords, ContentCategory.ARTICLE)
        assert spec.required_any_of == ("transformers", "NLP")

    def test_all_of_uses_first_two_specific_concepts(self, builder):
        keywords = KeywordSet.from_tiers(
            main_topics=["stoicism"],
            specific_concepts=["virtue", "dichotomy of control", "logos"],
        )
        spec = builder.build(keywords, ContentCategory.BOOK)
        assert spec.required_all_of == (("virtue", "dichotomy of control"),)

    def test_all_of_with_single_concept(self, builder):
        keywords = KeywordSet.from_tiers(main_topics=["stoicism"], specific_concepts=["virtue"])
        spec = builder.build(keywords, ContentCategory.BOOK)
        assert spec.required_all_of == (("virtue",),)

    def test_all_of_omitted_without_concepts(self, builder):
        keywords = KeywordSet.from_tiers(main_topics=["stoicism"], related_terms=["philosophy"])
        spec = builder.build(keywords, ContentCategory.BOOK)
        assert spec.required_all_of == ()

    def test_no_main_topics_raises(self, builder):
        keywords = KeywordSet.from_tiers(specific_concepts=["virtue"])
        with pytest.raises(InvalidInputError):
            builder.build(keywords, ContentCategory.BOOK)

    def test_build_is_deterministic(self, builder, transformers_keywords):
        first = builder.build(transformers_keywords, ContentCategory.BOOK)
        second = builder.build(transformers_keywords, ContentCategory.BOOK)
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_video_filter_has_no_video_exclusion(self, builder, transformers_keywords):
        """Video queries target video hosts and never exclude them."""
        spec = builder.build(transformers_keywords, ContentCategory.VIDEO)
        assert "site:youtube.com" in spec.category_filter
        assert "-site:" not in spec.category_filter
        assert spec.category_filter != builder.build(transformers_keywords, ContentCategory.BOOK).category_filter

    @pytest.mark.parametrize("category", [ContentCategory.BOOK, ContentCategory.ARTICLE])
    def test_book_and_article_exclude_video(self, builder, transformers_keywords, category):
        spec = builder.build(transformers_keywords, category)
        assert "-site:youtube.com" in spec.category_filter

    def test_every_category_has_a_refinement(self):
        assert set(CATEGORY_REFINEMENTS) == set(ContentCategory)


class TestQueryAdapter:
    """Test QuerySpec -> provider query text."""

    def test_quote_term_drops_embedded_quotes(self):
        assert quote_term('say "hi"') == '"say hi"'

    def test_or_group(self):
        assert or_group(["a", "b c"]) == '("a" OR "b c")'

    def test_query_text(self, transformers_keywords):
        spec = QueryBuilder().build(transformers_keywords, ContentCategory.VIDEO)
        assert to_query_text(spec) == (
            '("transformers" OR "NLP") ("attention mechanism" OR "self-attention") site:youtube.com'
        )

    def test_query_text_without_concepts(self):
        keywords = KeywordSet.from_tiers(main_topics=["stoicism"])
        spec = QueryBuilder().build(keywords, ContentCategory.BOOK)
        assert to_query_text(spec) == '("stoicism") (book OR novel OR publication) -site:youtube.com'

    def test_filters_for_video(self, transformers_keywords):
        spec = QueryBuilder().build(transformers_keywords, ContentCategory.VIDEO)
        assert to_filters(spec, num_results=5) == {"num": 5, "video_syndicated": True}

    def test_filters_for_book(self, transformers_keywords):
        spec = QueryBuilder().build(transformers_keywords, ContentCategory.BOOK)
        assert to_filters(spec, num_results=10) == {"num": 10}
