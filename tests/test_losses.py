import pytest

try:
    import torch
except ImportError:
    torch = None


def _shortlist(source_ids, target_ids, vocab_size=12):
    from lexfilter.config import ShortlistConfig
    from lexfilter.lexicon import LexiconTable
    from lexfilter.shortlist import ShortlistBuilder

    config = ShortlistConfig(first_num=2, best_num=2)
    table = LexiconTable.from_entries([(1, 7, 0.6), (1, 9, 0.3), (2, 5, 0.9)], config)
    return ShortlistBuilder(table, config, vocab_size).build(source_ids, target_ids)


@pytest.mark.skipif(torch is None, reason="PyTorch is required for output layer tests")
def test_shortlisted_logits_match_full_logits():
    from lexfilter.models import ShortlistOutput

    torch.manual_seed(0)
    layer = ShortlistOutput(hidden_size=8, vocab_size=12)
    hidden = torch.randn(2, 3, 8)
    shortlist = _shortlist([1, 2], [3, 3, 11, 0, 7, 5])

    full = layer(hidden)
    reduced = layer(hidden, shortlist)

    assert not full.is_shortlisted
    assert reduced.is_shortlisted
    assert reduced.logits.shape == (2, 3, len(shortlist))
    expected = full.logits[..., list(shortlist.indices)]
    assert torch.allclose(reduced.logits, expected, atol=1e-6)


@pytest.mark.skipif(torch is None, reason="PyTorch is required for output layer tests")
def test_shortlist_beyond_vocabulary_is_rejected():
    from lexfilter.models import ShortlistOutput

    layer = ShortlistOutput(hidden_size=4, vocab_size=8)
    with pytest.raises(ValueError):
        layer(torch.randn(1, 4), _shortlist([1], [0]))


@pytest.mark.skipif(torch is None, reason="PyTorch is required for loss tests")
def test_shortlist_loss_equals_full_loss_restricted_to_shortlist():
    from lexfilter.models import ShortlistOutput
    from lexfilter.objectives import output_cross_entropy, shortlist_cross_entropy

    torch.manual_seed(1)
    layer = ShortlistOutput(hidden_size=8, vocab_size=12)
    hidden = torch.randn(2, 3, 8, requires_grad=True)
    targets = torch.tensor([[3, 3, 11], [0, 7, 5]])
    shortlist = _shortlist([1, 2], targets.reshape(-1).tolist())

    output = layer(hidden, shortlist)
    result = output_cross_entropy(output, targets)

    index = shortlist.indices_tensor()
    restricted = layer(hidden).logits.index_select(-1, index)
    expected = torch.nn.functional.cross_entropy(
        restricted.reshape(-1, len(shortlist)),
        shortlist.mapped_tensor(),
    )
    assert result.num_tokens == 6
    assert torch.allclose(result.loss, expected, atol=1e-6)
    assert torch.allclose(shortlist_cross_entropy(output.logits, shortlist).loss, expected, atol=1e-6)

    result.loss.backward()
    assert hidden.grad is not None
    untouched = [i for i in range(12) if i not in shortlist]
    assert torch.count_nonzero(layer.proj.weight.grad[untouched]) == 0


@pytest.mark.skipif(torch is None, reason="PyTorch is required for loss tests")
def test_masked_positions_do_not_contribute():
    from lexfilter.objectives import shortlist_cross_entropy

    shortlist = _shortlist([], [0, 1, 11, 11])
    logits = torch.randn(4, len(shortlist))
    mask = torch.tensor([True, True, False, False])

    masked = shortlist_cross_entropy(logits, shortlist, mask)
    unmasked = torch.nn.functional.cross_entropy(logits[:2], shortlist.mapped_tensor()[:2])

    assert masked.num_tokens == 2
    assert torch.allclose(masked.loss, unmasked, atol=1e-6)


@pytest.mark.skipif(torch is None, reason="PyTorch is required for loss tests")
def test_shape_mismatch_is_rejected():
    from lexfilter.objectives import shortlist_cross_entropy

    shortlist = _shortlist([], [0, 1])
    with pytest.raises(ValueError):
        shortlist_cross_entropy(torch.randn(2, len(shortlist) + 1), shortlist)
    with pytest.raises(ValueError):
        shortlist_cross_entropy(torch.randn(3, len(shortlist)), shortlist)
