"""Tests for unigram and n-gram tokenization."""
from __future__ import annotations

import pytest

from src.discourse import Document
from src.discourse.errors import ConfigurationError
from src.discourse.tokenize import NGramStream, UnigramStream, normalize_words, tokenize


def _doc(text: str, document_id: str = "doc.txt") -> Document:
    return Document(document_id=document_id, text=text)


def test_normalize_words_casefolds_and_strips_punctuation() -> None:
    words = list(normalize_words("Apoio, FISCALIZAÇÃO e 2011 ao crime-ambiental."))

    assert words == ["apoio", "fiscalização", "e", "2011", "ao", "crime", "ambiental"]


def test_unigrams_apply_stopword_digit_and_length_filters() -> None:
    stream = UnigramStream(_doc("O apoio ao Decreto 7572 de 2011, art12 e aço."), stopwords=frozenset({"decreto"}))

    tokens = list(stream)

    assert [token.term for token in tokens] == ["apoio", "aço"]
    assert [token.position for token in tokens] == [0, 1]
    assert {token.document_id for token in tokens} == {"doc.txt"}


def test_min_length_is_configurable() -> None:
    stream = UnigramStream(_doc("ir de uma vez"), min_length=2)

    assert list(stream.terms()) == ["ir", "de", "uma", "vez"]


def test_streams_are_restartable() -> None:
    unigram_stream = UnigramStream(_doc("fomento ao extrativismo sustentável"))
    bigram_stream = NGramStream(_doc("fomento ao extrativismo sustentável"))

    assert list(unigram_stream) == list(unigram_stream)
    assert list(bigram_stream) == list(bigram_stream)


def test_bigrams_use_the_unfiltered_word_stream() -> None:
    stream = NGramStream(_doc("O apoio do governo em 2011"))

    assert list(stream.pairs()) == [
        ("o", "apoio"),
        ("apoio", "do"),
        ("do", "governo"),
        ("governo", "em"),
        ("em", "2011"),
    ]


def test_trigram_windows() -> None:
    grams = list(NGramStream(_doc("um dois tres quatro"), n=3))

    assert [gram.text for gram in grams] == ["um dois tres", "dois tres quatro"]
    assert grams[1].left == "dois"
    assert grams[1].right == "quatro"


def test_empty_document_yields_no_tokens() -> None:
    document = _doc("")

    assert list(tokenize(document, mode="unigram")) == []
    assert list(tokenize(document, mode="bigram")) == []
    assert list(tokenize(_doc("palavra"), mode="bigram")) == []


def test_tokenize_rejects_unknown_mode() -> None:
    with pytest.raises(ConfigurationError, match="trigram"):
        tokenize(_doc("texto"), mode="trigram")  # type: ignore[arg-type]


def test_document_requires_identifier() -> None:
    with pytest.raises(ValueError):
        Document(document_id="", text="texto")
