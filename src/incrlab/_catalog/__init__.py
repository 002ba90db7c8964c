"""The registered catalog of labs."""

from incrlab._lab import LabDef

from ._computations import EagerFilter, EagerMap, LazyFilter, LazyMap, Max, Reverse, Sum
from ._distributions import UniformInsert, UniformPrepend
from ._lists import (
    NIL,
    Checkpoint,
    Cons,
    Nil,
    count_checkpoints,
    divisible_by_three,
    iter_list,
    list_elements,
    square,
)
from ._scenarios import CleanDirty, NamedListEditor, NamedListMap, Unimplemented, VecMax, VecMaxInput


def all_labs() -> list[LabDef]:
    """Return every registered lab, in a stable order."""
    return [
        LabDef("eg-clean-dirty", CleanDirty(), CleanDirty()),
        LabDef("eg-oopsla2015-sec2", NamedListEditor(), NamedListMap()),
        LabDef("list-eager-map", UniformPrepend(), EagerMap(square)),
        LabDef("list-lazy-map", UniformPrepend(), LazyMap(square)),
        LabDef("list-eager-filter", UniformPrepend(), EagerFilter(divisible_by_three)),
        LabDef("list-lazy-filter", UniformPrepend(), LazyFilter(divisible_by_three)),
        LabDef("list-reverse", UniformPrepend(), Reverse()),
        LabDef("list-sum", UniformPrepend(), Sum()),
        LabDef("list-max", UniformPrepend(), Max()),
        LabDef("list-insert-eager-map", UniformInsert(), EagerMap(square)),
        LabDef("vec-max", VecMaxInput(), VecMax()),
        LabDef("hammer-s17-hw0-filter", NamedListEditor(), Unimplemented("hammer-s17-hw0 list_filter")),
        LabDef("hammer-s17-hw0-split", NamedListEditor(), Unimplemented("hammer-s17-hw0 list_split")),
        LabDef("hammer-s17-hw0-reverse", NamedListEditor(), Unimplemented("hammer-s17-hw0 list_reverse")),
    ]


def find_lab(name: str) -> LabDef:
    """Look up a registered lab by name.

    Raises:
        KeyError: If no lab has that name.

    """
    for lab in all_labs():
        if lab.name == name:
            return lab
    raise KeyError(name)


__all__ = [
    "NIL",
    "Checkpoint",
    "Cons",
    "EagerFilter",
    "EagerMap",
    "LazyFilter",
    "LazyMap",
    "Max",
    "Nil",
    "Reverse",
    "Sum",
    "UniformInsert",
    "UniformPrepend",
    "all_labs",
    "count_checkpoints",
    "find_lab",
    "iter_list",
    "list_elements",
]
