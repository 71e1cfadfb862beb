"""
Tests for tokenizer / stopword filter
"""

import pytest

from related_posts.processing.tokenize import tokenize, normalize_words, is_stopword


def test_tokenize_lowercases_and_strips_punctuation():
    """測試小寫化與去除標點"""
    tokens = tokenize("Python's Typing, Explained!")

    assert tokens == ["python", "typing", "explained"]


def test_tokenize_drops_short_tokens_and_stopwords():
    """測試丟棄短字與 stopwords"""
    tokens = tokenize("An introduction to the art of data and AI from scratch")

    assert "the" not in tokens
    assert "and" not in tokens
    assert "from" not in tokens
    assert "ai" not in tokens  # 長度 <= 2
    assert tokens == ["introduction", "art", "data", "scratch"]


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_tokenize_empty_text(text):
    """測試空字串回傳空 list (不拋出例外)"""
    assert tokenize(text) == []


def test_normalize_words_keeps_stopwords():
    """測試 normalize_words 保留 stopwords"""
    words = normalize_words("Walking through the forest")

    assert words == ["walking", "through", "the", "forest"]
    assert is_stopword("through")
    assert not is_stopword("forest")


def test_tokenize_is_deterministic():
    """測試相同輸入 = 相同輸出"""
    text = "Value investing tools for value investors"

    assert tokenize(text) == tokenize(text)
