"""Pure helpers that turn path strings into normalized component lists."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

SEPARATOR = "/"
PARENT = ".."
CURRENT = "."
HOME = "~"


def fix_dot_dots(components: Sequence[str]) -> List[str]:
    """
    Remove every ``[<name>, ".."]`` pair.

    Any ``..`` left in the result is part of a leading run and refers to an
    ancestor above the first known directory.
    """
    result = list(components)
    if PARENT not in result:
        return result

    index = max(1, result.index(PARENT))
    while index < len(result):
        if result[index] == PARENT and result[index - 1] != PARENT:
            del result[index - 1 : index + 1]
            index = max(1, index - 1)
        else:
            index += 1
    return result


def normalize(components: Iterable[str]) -> List[str]:
    """Drop empty and ``.`` components, then collapse ``..`` pairs."""

    return fix_dot_dots([part for part in components if part and part != CURRENT])


def split_components(stringpath: str) -> List[str]:
    return stringpath.split(SEPARATOR)


def parse_components(stringpath: str, home: str) -> Tuple[List[str], bool]:
    """
    Parse a path string.

    Args:
        stringpath: The path as typed by a user. The empty string means ``.``.
        home: The home directory, used when the first component is ``~``.

    Returns:
        The normalized components and whether they are relative to the
        current working directory.
    """
    raw = split_components(stringpath or CURRENT)
    if raw[0] == "":
        return normalize(raw), False
    if raw[0] == HOME:
        return normalize(split_components(home) + raw[1:]), False
    return normalize(raw), True


def first_difference(left: Sequence[str], right: Sequence[str]) -> int:
    """Index of the first differing component, or the shorter length."""

    for index, (a, b) in enumerate(zip(left, right)):
        if a != b:
            return index
    return min(len(left), len(right))
