"""
Expansion of substring annotations into character indices.
"""

from typing import Iterable, List

from texthighlighter.editor.annotations import IndexAnnotation, SubstringAnnotation


def resolve_indices(text: str, substring: str) -> List[int]:
    """
    Return every character index covered by an occurrence of substring.

    The scan moves one character at a time whether or not it matched, so
    overlapping occurrences are all found and indices shared by two
    occurrences appear twice: ``resolve_indices("aaa", "aa")`` is
    ``[0, 1, 1, 2]``. A substring longer than the text yields ``[]``.
    """
    if not substring:
        return []

    size = len(substring)
    indices: List[int] = []
    for start in range(len(text) - size + 1):
        if text.startswith(substring, start):
            indices.extend(range(start, start + size))
    return indices


def expand_annotations(
    text: str,
    indices: Iterable[IndexAnnotation],
    substrings: Iterable[SubstringAnnotation],
) -> List[IndexAnnotation]:
    """
    Combine index annotations with the expansion of substring annotations.

    Index annotations come first, in add order, followed by one
    IndexAnnotation per resolved index of each substring annotation.
    """
    combined = list(indices)
    for annotation in substrings:
        combined.extend(
            IndexAnnotation(annotation.style, index, annotation.color)
            for index in resolve_indices(text, annotation.text)
        )
    return combined
