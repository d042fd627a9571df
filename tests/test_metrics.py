import pytest


torch = pytest.importorskip("torch")

from lexfilter.config import ShortlistConfig
from lexfilter.lexicon import LexiconTable
from lexfilter.shortlist import build_shortlist
from lexfilter.utils import lexicon_recall, shortlist_ratio, target_coverage


def test_shortlist_metrics():
    config = ShortlistConfig(first_num=2)
    table = LexiconTable.from_entries([(0, 5, 0.5), (1, 6, 0.5)], config)
    result = build_shortlist(table, config, 20, [0], [3])

    assert shortlist_ratio(result, 20) == pytest.approx(4 / 20)
    assert target_coverage(result, [0, 3, 5, 6]) == pytest.approx(0.75)
    assert target_coverage(result, []) == 0.0
    assert lexicon_recall(table, [0, 1], [5, 6, 7, 7]) == pytest.approx(2 / 3)
    assert lexicon_recall(table, [0], []) == 0.0
