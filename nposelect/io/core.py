"""Shared functionality for election file I/O. Internal."""

from __future__ import annotations

import json
import typing
from typing import Any, Callable, Tuple, TextIO

from nposelect.errors import InvalidData


def loaders(object_loader: Callable[[Any], Any]
            ) -> Tuple[Callable[..., Any], Callable[..., Any]]:
    """Create load() and loads() functions from a JSON object parser."""
    return_annot = typing.get_type_hints(object_loader).get('return')
    if return_annot is None:
        return_annot = Any

    def loads(text: str, **kwargs) -> return_annot:
        try:
            parsed = json.loads(text)
        except ValueError as e:
            raise InvalidData(f'malformed JSON: {e}') from e
        return object_loader(parsed, **kwargs)

    def load(file: TextIO, **kwargs) -> return_annot:
        return loads(file.read(), **kwargs)

    return load, loads


def dumpers(object_dumper: Callable[..., Any]
            ) -> Tuple[Callable[..., None], Callable[..., str]]:
    """Create dump() and dumps() functions from a JSON object builder."""

    def dumps(*args, indent: int = 2, **kwargs) -> str:
        return json.dumps(object_dumper(*args, **kwargs), indent=indent)

    def dump(file: TextIO, *args, **kwargs) -> None:
        file.write(dumps(*args, **kwargs))
        file.write('\n')

    return dump, dumps
