'''Various utility functions for other modules of nposelect.

There should normally be no need to use these functions directly.
'''

from fractions import Fraction
from typing import Any, List, Iterable, Sequence

from nposelect.errors import ValidationError


def parse_stake(value: Any, field: str = 'stake') -> int:
    '''Interpret a stake amount as a non-negative integer.

    Integers are passed through, decimal strings (as produced by chain
    tooling for amounts that overflow JSON number precision elsewhere) are
    parsed. Anything else is refused; floats are refused as well since they
    cannot carry exact balances.

    :param value: The stake amount.
    :param field: Name of the field to report in errors.
    :raises ValidationError: If the value is not a non-negative integer.
    '''
    if isinstance(value, bool):
        raise ValidationError(f'invalid stake value: {value!r}', field)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as e:
            raise ValidationError(
                f'invalid stake value: {value!r}, expected an integer', field
            ) from e
    if not isinstance(value, int):
        raise ValidationError(
            f'invalid stake value: {value!r}, expected an integer', field
        )
    if value < 0:
        raise ValidationError(f'stake must not be negative: {value}', field)
    return value


def unique_ordered(items: Iterable[Any]) -> List[Any]:
    '''Return items without duplicates, keeping their first occurrences.'''
    seen = set()
    output = []
    for item in items:
        if item not in seen:
            seen.add(item)
            output.append(item)
    return output


def find_duplicates(items: Iterable[Any]) -> List[Any]:
    '''Return items that occur more than once, in order of first repetition.'''
    seen = set()
    duplicates = []
    for item in items:
        if item in seen and item not in duplicates:
            duplicates.append(item)
        seen.add(item)
    return duplicates


def split_integer(total: int,
                  ratios: Sequence[Fraction],
                  ) -> List[int]:
    '''Split an integer amount by ratios, keeping the sum exact.

    Every part is first rounded down; the units lost by rounding are then
    handed out one by one to the parts with the largest remainders (the
    earlier part wins on equal remainders). The ratios are expected to sum
    to one.

    :param total: Amount to split.
    :param ratios: Share of each part.
    :returns: Integer parts in the order of ratios, summing to total.
    '''
    if not ratios:
        return []
    exact = [total * ratio for ratio in ratios]
    parts = [int(share.numerator // share.denominator) for share in exact]
    remainders = [share - part for share, part in zip(exact, parts)]
    leftover = total - sum(parts)
    order = sorted(
        range(len(parts)),
        key=lambda i: (-remainders[i], i)
    )
    for i in order[:leftover]:
        parts[i] += 1
    return parts


def abbreviated_list(items: Sequence[str], limit: int = 5) -> str:
    '''Join the first few items for display in messages.'''
    shown = ', '.join(items[:limit])
    if len(items) > limit:
        shown += f' (and {len(items) - limit} more)'
    return shown
