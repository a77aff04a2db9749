"""Prelude - general purpose producers, consumers, pipes and folds.

Several names match builtins (``map``, ``filter``, ``sum``, ``all``, ...);
import the module qualified:

    from pipekit import prelude as P
"""

from pipekit.combinators.ops import zip, zip_with
from pipekit.prelude.consumers import consume_with, drain, print
from pipekit.prelude.folds import (
    all,
    and_,
    any,
    elem,
    find,
    find_index,
    head,
    index,
    last,
    length,
    maximum,
    minimum,
    not_elem,
    null,
    or_,
    product,
    sum,
)
from pipekit.prelude.pipes import (
    chain,
    concat,
    drop,
    drop_while,
    elem_indices,
    filter,
    filter_m,
    find_indices,
    map,
    map_foldable,
    map_m,
    scan,
    scan_m,
    sequence,
    take,
    take_while,
    take_while_returning,
)
from pipekit.prelude.producers import each, repeat_m, replicate_m, unfoldr
from pipekit.traversal import (
    fold,
    fold_m,
    fold_m_returning,
    fold_returning,
    to_list,
    to_list_returning,
)

__all__ = [
    # Producers
    "each",
    "repeat_m",
    "replicate_m",
    "unfoldr",
    # Consumers
    "consume_with",
    "print",
    "drain",
    # Pipes
    "map",
    "map_m",
    "sequence",
    "map_foldable",
    "filter",
    "filter_m",
    "take",
    "take_while",
    "take_while_returning",
    "drop",
    "drop_while",
    "concat",
    "elem_indices",
    "find_indices",
    "scan",
    "scan_m",
    "chain",
    # Folds
    "fold",
    "fold_returning",
    "fold_m",
    "fold_m_returning",
    "all",
    "any",
    "and_",
    "or_",
    "elem",
    "not_elem",
    "find",
    "find_index",
    "head",
    "index",
    "last",
    "length",
    "maximum",
    "minimum",
    "null",
    "sum",
    "product",
    "to_list",
    "to_list_returning",
    # Zips
    "zip",
    "zip_with",
]
