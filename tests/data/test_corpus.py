# tests/data/test_corpus.py
from crflearn.data.corpus import Attribute, Corpus, Instance, Item


def _instance(n_items: int, group: int) -> Instance:
    inst = Instance(group=group)
    for i in range(n_items):
        inst.append(Item([Attribute(i)]), 0)
    return inst


def test_total_items_and_groups():
    corpus = Corpus()
    corpus.append(_instance(3, 0))
    corpus.append(_instance(2, 1))

    assert len(corpus) == corpus.num_instances == 2
    assert corpus.total_items() == 5
    assert corpus.groups() == [0, 1]


def test_clear_releases_instances():
    corpus = Corpus()
    corpus.append(_instance(1, 0))
    corpus.clear()
    corpus.clear()

    assert len(corpus) == 0
    assert corpus.total_items() == 0
