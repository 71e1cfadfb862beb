"""
Tests for feature cache and corpus hash stability
"""

import pytest

from related_posts.models import Document
from related_posts.storage.feature_cache import FeatureCache, compute_corpus_hash
from related_posts.utils.hashing import config_hash


def create_corpus():
    """Helper to create test corpus"""
    return [
        Document(id="a", title="Python typing guide", body="Static typing for python projects", tags=["python"]),
        Document(id="b", title="Pasta recipes", body="Cooking pasta with tomato sauce", category="Food"),
        Document(id="c", title="Gardening basics", body="Growing tomato plants at home", category="Home"),
    ]


def test_corpus_hash_stability():
    """測試相同 corpus = 相同 hash"""
    assert compute_corpus_hash(create_corpus()) == compute_corpus_hash(create_corpus())


def test_corpus_hash_order_invariant():
    """測試文件順序不影響 hash"""
    docs = create_corpus()

    assert compute_corpus_hash(docs) == compute_corpus_hash(list(reversed(docs)))


def test_corpus_hash_changes_with_content():
    """測試內容改變時 hash 改變"""
    docs = create_corpus()
    changed = docs[:2] + [docs[2].model_copy(update={"body": "Growing herbs indoors"})]

    assert compute_corpus_hash(docs) != compute_corpus_hash(changed)


def test_corpus_hash_format():
    """測試 hash 格式 (64 字元 hex)"""
    corpus_hash = compute_corpus_hash(create_corpus())

    assert len(corpus_hash) == 64
    assert all(c in '0123456789abcdef' for c in corpus_hash)


def test_build_covers_every_document():
    """測試 build 為每份文件建立 bundle"""
    docs = create_corpus()

    cache = FeatureCache.build(docs)

    assert set(cache.bundles) == {"a", "b", "c"}
    assert cache.is_current(docs)
    assert cache.get("missing") is None


def test_refresh_reuses_when_current():
    """測試 corpus 未變時沿用同一個 cache"""
    docs = create_corpus()
    cache = FeatureCache.build(docs)

    assert cache.refresh(list(reversed(docs))) is cache


def test_refresh_rebuilds_when_corpus_changes():
    """測試 corpus 改變時整批重建"""
    docs = create_corpus()
    cache = FeatureCache.build(docs)
    new_docs = docs + [Document(id="d", title="Stock screening", body="Value investing screener")]

    refreshed = cache.refresh(new_docs)

    assert refreshed is not cache
    assert set(refreshed.bundles) == {"a", "b", "c", "d"}
    assert refreshed.is_current(new_docs)
    assert not cache.is_current(new_docs)


def test_empty_cache():
    """測試空 cache"""
    cache = FeatureCache.empty()

    assert cache.bundles == {}
    assert cache.is_current([])


def test_config_hash_ignores_output_dir():
    """測試 config hash 不受 output_dir 影響"""
    base = {"mode": "hybrid", "max_results": 5, "output_dir": "out"}
    moved = {"mode": "hybrid", "max_results": 5, "output_dir": "elsewhere"}

    assert config_hash(base) == config_hash(moved)
    assert config_hash(base) != config_hash({"mode": "ml", "max_results": 5})
    assert len(config_hash(base)) == 16
