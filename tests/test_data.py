"""Vocabulary and batch tests."""

import pytest


torch = pytest.importorskip("torch")

from lexfilter.data import ParallelBatch, SyntheticDatasetConfig, SyntheticParallelDataset, Vocab
from lexfilter.data.vocab import UNK
from lexfilter.exceptions import ParseError, UnknownSymbolError


def test_build_orders_by_frequency():
    vocab = Vocab.build([["b", "a", "b"], ["c", "b", "a"]])
    assert vocab.itos[3:] == ["b", "a", "c"]
    assert vocab["b"] == 3


def test_unknown_symbol_raises():
    vocab = Vocab(itos=["x", "y"], name="source")
    with pytest.raises(UnknownSymbolError) as excinfo:
        vocab["z"]
    assert "source" in str(excinfo.value)


def test_encode_falls_back_to_unk():
    vocab = Vocab.build([["a"]])
    assert vocab.encode(["a", "zzz"]) == [vocab["a"], vocab[UNK]]
    assert vocab.decode([vocab["a"], 99]) == ["a", UNK]


def test_save_and_load(tmp_path):
    vocab = Vocab.build([["der", "die", "der"]])
    path = tmp_path / "vocab.txt"
    vocab.save(str(path))
    loaded = Vocab.load(str(path))
    assert loaded.itos == vocab.itos
    assert loaded.lookup(3) == "der"


def test_load_with_counts_and_bad_count(tmp_path):
    path = tmp_path / "vocab.tsv"
    path.write_text("a\t10\nb\t5\n", encoding="utf-8")
    assert Vocab.load(str(path)).itos == ["a", "b"]
    path.write_text("a\tmany\n", encoding="utf-8")
    with pytest.raises(ParseError):
        Vocab.load(str(path))


def test_duplicate_tokens_rejected():
    with pytest.raises(ValueError):
        Vocab(itos=["a", "a"])


def test_batch_ids_and_validation():
    batch = ParallelBatch(
        source=torch.tensor([[4, 5, 0]]),
        target=torch.tensor([[7, 0, 0]]),
        source_mask=torch.tensor([[True, True, False]]),
    )
    assert batch.batch_size == 1
    assert batch.source_ids() == [4, 5]
    assert batch.target_ids() == [7, 0, 0]
    with pytest.raises(ValueError):
        ParallelBatch(source=torch.zeros(2, 3, dtype=torch.long), target=torch.zeros(1, 3, dtype=torch.long))


def test_synthetic_dataset_is_deterministic():
    cfg = SyntheticDatasetConfig(src_vocab_size=10, trg_vocab_size=20, num_batches=2)
    first = [b.target.tolist() for b in SyntheticParallelDataset(cfg)]
    second = [b.target.tolist() for b in SyntheticParallelDataset(cfg)]
    assert first == second
    assert len(SyntheticParallelDataset(cfg)) == 2
    entries = SyntheticParallelDataset(cfg).lexicon_entries()
    assert all(src != cfg.pad_id for src, _, _ in entries)
