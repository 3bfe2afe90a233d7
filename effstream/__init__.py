"""
effstream - effectful streams for Python.

A stream is a description of values produced one at a time with effects in
between, ending with a result. Nothing runs until a consumer drives the
stream, and every operation that sequences effects takes the effect system
(``IDENTITY``, ``IO``, ``WRITER`` or your own ``Effects``) explicitly.

Several names shadow builtins (``map``, ``filter``, ``sum``, ``zip``,
``next``), so import the package qualified:

Example:
    >>> import effstream as S
    >>> from effstream import IDENTITY
    >>>
    >>> S.to_list(S.take(IDENTITY, 3, S.repeat(1)))
    [1, 1, 1]
    >>> IDENTITY.run(S.sum(IDENTITY, S.filter(IDENTITY, lambda n: n % 2 == 0, S.each([1, 2, 3, 4]))))
    6
"""

from effstream.core import (
    append,
    cons,
    done,
    each,
    effect,
    inspect,
    map_result,
    next,
    suspend,
    then,
    uncons,
    unfold,
    unfoldr,
    yield_,
)
from effstream.effects import (
    IDENTITY,
    IO,
    WRITER,
    Action,
    Effects,
    IdentityEffects,
    IOEffects,
    WriterEffects,
    perform,
)
from effstream.errors import EffectTypeError, StreamTypeError
from effstream.folds import (
    drain,
    fold,
    fold_m,
    fold_m_with_result,
    fold_with_result,
    foldr_m,
    map_m_,
    product,
    product_with_result,
    sum,
    sum_with_result,
    to_list,
    to_list_m,
    to_list_m_with_result,
)
from effstream.lines import (
    HandleLineReader,
    HandleLineWriter,
    LineReader,
    LineWriter,
    WriteOutcome,
    from_handle,
    from_reader,
    print_,
    read_lines,
    stdin_lines,
    stdout_lines,
    stdout_lines_with_result,
    to_handle,
    to_writer,
)
from effstream.producers import (
    enum_from,
    enum_from_step_n,
    enum_from_to,
    iterate,
    iterate_m,
    repeat,
    repeat_m,
    replicate,
    replicate_m,
    reread,
)
from effstream.split import (
    break_,
    chunks_of,
    concats,
    maps,
    maps_to_elements,
    span,
    split_at,
)
from effstream.transform import (
    chain,
    concat,
    drop,
    drop_while,
    filter,
    filter_m,
    for_,
    map,
    map_foldable,
    map_m,
    read,
    scan,
    scan_m,
    sequence,
    show,
    take,
    take_while,
)
from effstream.types import (
    Done,
    Either,
    Emit,
    Layer,
    Left,
    Nested,
    Of,
    Right,
    Stream,
    Suspended,
    strictly,
)
from effstream.zips import zip, zip_with

__version__ = "0.1.0"

__all__ = [
    # Types
    "Done",
    "Either",
    "Emit",
    "Layer",
    "Left",
    "Nested",
    "Of",
    "Right",
    "Stream",
    "Suspended",
    "strictly",
    # Effect systems
    "Action",
    "Effects",
    "IDENTITY",
    "IO",
    "IOEffects",
    "IdentityEffects",
    "WRITER",
    "WriterEffects",
    "perform",
    # Errors
    "EffectTypeError",
    "StreamTypeError",
    # Core
    "append",
    "cons",
    "done",
    "each",
    "effect",
    "inspect",
    "map_result",
    "next",
    "suspend",
    "then",
    "uncons",
    "unfold",
    "unfoldr",
    "yield_",
    # Producers
    "enum_from",
    "enum_from_step_n",
    "enum_from_to",
    "iterate",
    "iterate_m",
    "repeat",
    "repeat_m",
    "replicate",
    "replicate_m",
    "reread",
    # Transformers
    "chain",
    "concat",
    "drop",
    "drop_while",
    "filter",
    "filter_m",
    "for_",
    "map",
    "map_foldable",
    "map_m",
    "read",
    "scan",
    "scan_m",
    "sequence",
    "show",
    "take",
    "take_while",
    # Splitting
    "break_",
    "chunks_of",
    "concats",
    "maps",
    "maps_to_elements",
    "span",
    "split_at",
    # Folds
    "drain",
    "fold",
    "fold_m",
    "fold_m_with_result",
    "fold_with_result",
    "foldr_m",
    "map_m_",
    "product",
    "product_with_result",
    "sum",
    "sum_with_result",
    "to_list",
    "to_list_m",
    "to_list_m_with_result",
    # Zips
    "zip",
    "zip_with",
    # Line IO
    "HandleLineReader",
    "HandleLineWriter",
    "LineReader",
    "LineWriter",
    "WriteOutcome",
    "from_handle",
    "from_reader",
    "print_",
    "read_lines",
    "stdin_lines",
    "stdout_lines",
    "stdout_lines_with_result",
    "to_handle",
    "to_writer",
]
