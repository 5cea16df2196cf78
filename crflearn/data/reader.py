# crflearn/data/reader.py
"""
Reader for the CRFsuite tab-separated data format.

    LABEL <TAB> ATTR[:WEIGHT] <TAB> ATTR[:WEIGHT] ...

- one item per line, an empty line ends an instance
- WEIGHT defaults to 1.0
- ``\\:`` and ``\\\\`` escape ':' and '\\' inside names
- a leading ``@weight:W`` line sets the weight of the instance
"""
from __future__ import annotations

from typing import Optional, TextIO, Tuple

from crflearn import logs
from crflearn.data.corpus import Attribute, Corpus, Instance, Item
from crflearn.data.dictionary import Dictionary
from crflearn.utils.errors import InputFileError


def split_field(field: str) -> Tuple[str, Optional[str]]:
    """
    Split ``name[:value]`` at the first unescaped ':' and unescape name.
    """
    name = []
    i = 0
    n = len(field)
    while i < n:
        c = field[i]
        if c == "\\" and i + 1 < n:
            name.append(field[i + 1])
            i += 2
            continue
        if c == ":":
            return "".join(name), field[i + 1:]
        name.append(c)
        i += 1
    return "".join(name), None


def read_data(
    stream: TextIO,
    corpus: Corpus,
    attrs: Dictionary,
    labels: Dictionary,
    group: int,
    *,
    name: str = "<stdin>",
    progress=None,
) -> int:
    """
    Append every instance of ``stream`` to ``corpus``.

    Contract:
    - attribute / label strings are interned into the shared dictionaries
    - every appended instance is tagged with ``group``
    - returns the number of instances appended by this call
    """
    n = 0
    consumed = 0
    inst = Instance(group=group)

    def flush() -> None:
        nonlocal inst, n
        if inst.num_items > 0:
            corpus.append(inst)
            n += 1
        inst = Instance(group=group)

    for lineno, line in enumerate(stream, start=1):
        consumed += len(line.encode("utf-8"))
        if progress is not None:
            progress.update(consumed)

        line = line.rstrip("\r\n")
        if not line.strip():
            flush()
            continue

        fields = line.split("\t")
        head, head_value = split_field(fields[0])

        if head.startswith("@"):
            if head == "@weight":
                inst.weight = _to_float(head_value, name, lineno)
            else:
                logs.warning(f"[read_data] {name}:{lineno} unrecognized declaration: {head}")
            continue

        item = Item()
        for field in fields[1:]:
            if not field:
                continue
            attr, value = split_field(field)
            weight = 1.0 if value is None else _to_float(value, name, lineno)
            item.contents.append(Attribute(attrs.get(attr), weight))

        inst.append(item, labels.get(head))

    # last instance may not be followed by an empty line
    flush()

    if progress is not None:
        progress.done()

    logs.debug(f"[read_data] {name}: {n} instances (group={group})")
    return n


def _to_float(value: Optional[str], name: str, lineno: int) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InputFileError(
            f"{name}:{lineno}: invalid weight: {value!r}", path=name
        ) from None
