"""Tests for shortlist configuration and the filter option list."""

import dataclasses

import pytest


torch = pytest.importorskip("torch")

from lexfilter.config import FilterOptions, ShortlistConfig
from lexfilter.data import Vocab
from lexfilter.exceptions import ConfigError, LexFilterError, ParseError


def test_defaults():
    options = FilterOptions.from_strings(["lex.s2t"])
    assert options.path == "lex.s2t"
    assert options.shortlist == ShortlistConfig(first_num=100, best_num=100, threshold=0.0)


def test_all_fields_parsed():
    options = FilterOptions.from_strings(["lex.s2t", "50", "20", "0.01"])
    assert options.shortlist.first_num == 50
    assert options.shortlist.best_num == 20
    assert options.shortlist.threshold == pytest.approx(0.01)


def test_empty_option_list_is_config_error():
    with pytest.raises(ConfigError):
        FilterOptions.from_strings([])


def test_blank_path_is_config_error():
    with pytest.raises(ConfigError):
        FilterOptions.from_strings(["  ", "10"])


@pytest.mark.parametrize(
    "values",
    [
        ["lex", "ten"],
        ["lex", "10", "1.5"],
        ["lex", "10", "10", "low"],
    ],
)
def test_malformed_numbers_are_parse_errors(values):
    with pytest.raises(ParseError) as excinfo:
        FilterOptions.from_strings(values)
    assert isinstance(excinfo.value, LexFilterError)
    assert isinstance(excinfo.value, ValueError)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"first_num": -1},
        {"best_num": -5},
        {"threshold": 1.5},
        {"threshold": -0.1},
    ],
)
def test_out_of_range_values_are_config_errors(kwargs):
    with pytest.raises(ConfigError):
        ShortlistConfig(**kwargs)


def test_config_is_frozen():
    config = ShortlistConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.first_num = 5  # type: ignore[misc]


def test_create_table_requires_existing_file(tmp_path):
    options = FilterOptions.from_strings([str(tmp_path / "missing.lex")])
    vocab = Vocab(itos=["a"])
    with pytest.raises(ConfigError):
        options.create_table(vocab, vocab)


def test_create_table_loads_lexicon(tmp_path):
    path = tmp_path / "lex.s2t"
    path.write_text("haus house 0.8\nhaus home 0.3\n", encoding="utf-8")
    src_vocab = Vocab(itos=["house", "home"], name="source")
    trg_vocab = Vocab(itos=["haus"], name="target")
    options = FilterOptions.from_strings([str(path), "1", "1", "0.5"])

    table = options.create_table(src_vocab, trg_vocab)

    assert table.row(0).to_dict() == {0: pytest.approx(0.8)}
    assert len(table.row(1)) == 0
