# crflearn/data/corpus.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List


@dataclass(frozen=True)
class Attribute:
    aid: int
    value: float = 1.0


@dataclass
class Item:
    """One position of a sequence: the attributes observed there."""
    contents: List[Attribute] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.contents)


@dataclass
class Instance:
    """
    One labelled sequence.

    Contract:
    - len(items) == len(labels)
    - group = 0-based index of the data set the instance was read from
    """
    items: List[Item] = field(default_factory=list)
    labels: List[int] = field(default_factory=list)
    weight: float = 1.0
    group: int = 0

    def append(self, item: Item, label: int) -> None:
        self.items.append(item)
        self.labels.append(label)

    @property
    def num_items(self) -> int:
        return len(self.items)


class Corpus:
    """
    Growing in-memory training set (owned by the learn command).

    Instances are appended in reading order and never reordered:
    holdout selection relies on group ids following the order in
    which data sets were listed.
    """

    def __init__(self):
        self.instances: List[Instance] = []

    def append(self, inst: Instance) -> None:
        self.instances.append(inst)

    def __len__(self) -> int:
        return len(self.instances)

    def __iter__(self) -> Iterator[Instance]:
        return iter(self.instances)

    @property
    def num_instances(self) -> int:
        return len(self.instances)

    def total_items(self) -> int:
        return sum(inst.num_items for inst in self.instances)

    def groups(self) -> List[int]:
        return [inst.group for inst in self.instances]

    def clear(self) -> None:
        self.instances.clear()
