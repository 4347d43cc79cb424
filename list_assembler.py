"""Rebuilds nested <ol>/<ul> markup from a flat run of numbering entries.

Word stores lists as a flat sequence of paragraphs, each tagged with a level
and a numbering format. The assembler walks that sequence once, keeping the
currently open list tags on a stack, and emits properly nested HTML.
"""
from functools import reduce
from typing import Iterable, List, NamedTuple, Optional, Tuple

from models import NumberingEntry, NumberingFormat

OL_CLASSES = {
    NumberingFormat.DECIMAL: "decimal",
    NumberingFormat.LOWER_ROMAN: "lower-roman",
    NumberingFormat.UPPER_ROMAN: "upper-roman",
    NumberingFormat.LOWER_LETTER: "lower-letter",
    NumberingFormat.UPPER_LETTER: "upper-letter",
}


class ListState(NamedTuple):
    open_tags: Tuple[str, ...]  # closing tags, innermost last
    current_level: int  # level of the previous entry, -1 before the first
    previous_format: Optional[NumberingFormat]
    html: Tuple[str, ...]


# len(open_tags) == current_level + 1 holds after every step
EMPTY_STATE = ListState(open_tags=(), current_level=-1, previous_format=None, html=())


def list_tags(fmt: NumberingFormat) -> Tuple[str, str]:
    """Returns (open_tag, close_tag) for a numbering format."""
    if fmt == NumberingFormat.BULLET:
        return "<ul>", "</ul>"
    return f'<ol class="{OL_CLASSES.get(fmt, "decimal")}">', "</ol>"


def starts_new_list(state: ListState, entry: NumberingEntry) -> bool:
    # Format changes below level 0 keep nesting under the open stack
    if state.previous_format is None or state.previous_format == entry.format or entry.level != 0:
        return False
    return state.current_level == 0 or entry.format == NumberingFormat.BULLET


def step(state: ListState, entry: NumberingEntry) -> ListState:
    """Fold one entry into the state."""
    open_tags = list(state.open_tags)
    out = list(state.html)
    level = state.current_level

    if starts_new_list(state, entry):
        while open_tags:
            out.append(open_tags.pop())
        open_tag, close_tag = list_tags(entry.format)
        out.append(open_tag)
        open_tags.append(close_tag)
        level = entry.level

    while entry.level > level:
        open_tag, close_tag = list_tags(entry.format)
        out.append(open_tag)
        open_tags.append(close_tag)
        level += 1

    while entry.level < level:
        out.append(open_tags.pop())
        level -= 1

    out.append(f"<li>{entry.content_html}</li>")
    return ListState(
        open_tags=tuple(open_tags),
        current_level=entry.level,
        previous_format=entry.format,
        html=tuple(out),
    )


def close_all(state: ListState) -> ListState:
    out = list(state.html)
    out.extend(reversed(state.open_tags))
    return state._replace(open_tags=(), html=tuple(out))


def assemble_list(entries: Iterable[NumberingEntry]) -> str:
    """Turns one list run into a single well-formed HTML string."""
    return "".join(close_all(reduce(step, entries, EMPTY_STATE)).html)


def assemble_list_fragments(entries: Iterable[NumberingEntry]) -> List[str]:
    """Same as assemble_list but keeps the individual tags, handy for checks."""
    return list(close_all(reduce(step, entries, EMPTY_STATE)).html)
