"""Tests for the annotation store and substring resolution."""

import pytest

from texthighlighter.core.color import RGBA
from texthighlighter.core.errors import InvalidArgumentError
from texthighlighter.editor.annotations import (
    AnnotationStore,
    IndexAnnotation,
    Style,
    SubstringAnnotation,
)
from texthighlighter.editor.resolver import expand_annotations, resolve_indices

YELLOW = RGBA(1.0, 1.0, 0.0, 0.5)


class TestResolveIndices:
    """Tests for resolve_indices."""

    def test_overlapping_matches(self) -> None:
        assert resolve_indices("aaa", "aa") == [0, 1, 1, 2]

    def test_no_match(self) -> None:
        assert resolve_indices("hello", "xyz") == []

    def test_substring_longer_than_text(self) -> None:
        assert resolve_indices("ab", "abc") == []

    def test_match_at_end_of_text(self) -> None:
        assert resolve_indices("abcab", "ab") == [0, 1, 3, 4]

    def test_whole_text(self) -> None:
        assert resolve_indices("abc", "abc") == [0, 1, 2]

    def test_empty_text(self) -> None:
        assert resolve_indices("", "a") == []

    def test_case_sensitive(self) -> None:
        assert resolve_indices("The the", "the") == [4, 5, 6]

    @pytest.mark.parametrize(
        "text,substring",
        [
            ("banana", "ana"),
            ("mississippi", "ss"),
            ("aaaa", "a"),
            ("line one\nline two", "line"),
            ("xyz", "xyz"),
        ],
    )
    def test_indices_lie_inside_an_occurrence(self, text: str, substring: str) -> None:
        indices = resolve_indices(text, substring)
        assert indices
        starts = [i for i in range(len(text)) if text.startswith(substring, i)]
        assert len(indices) == len(starts) * len(substring)
        for index in indices:
            assert 0 <= index < len(text)
            assert any(start <= index < start + len(substring) for start in starts)
        assert indices == sorted(indices)


class TestExpandAnnotations:
    """Tests for expand_annotations."""

    def test_indices_first_then_substrings(self) -> None:
        fixed = IndexAnnotation(Style.UNDERLINE, 4, YELLOW)
        search = SubstringAnnotation(Style.HIGHLIGHT, "b", YELLOW)
        combined = expand_annotations("abcb", [fixed], [search])
        assert combined == [
            fixed,
            IndexAnnotation(Style.HIGHLIGHT, 1, YELLOW),
            IndexAnnotation(Style.HIGHLIGHT, 3, YELLOW),
        ]

    def test_substrings_keep_add_order(self) -> None:
        first = SubstringAnnotation(Style.WAVY_UNDERLINE, "c", YELLOW)
        second = SubstringAnnotation(Style.HIGHLIGHT, "a", YELLOW)
        combined = expand_annotations("abc", [], [first, second])
        assert [a.index for a in combined] == [2, 0]
        assert [a.style for a in combined] == [Style.WAVY_UNDERLINE, Style.HIGHLIGHT]


class TestAnnotationStore:
    """Tests for AnnotationStore."""

    def test_add_substring(self) -> None:
        store = AnnotationStore()
        annotation = store.add_substring(Style.HIGHLIGHT, "fox", YELLOW)
        assert annotation == SubstringAnnotation(Style.HIGHLIGHT, "fox", YELLOW)
        assert store.substrings == [annotation]
        assert store.indices == []

    def test_empty_substring_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            AnnotationStore().add_substring(Style.HIGHLIGHT, "", YELLOW)

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            AnnotationStore().add_index(Style.HIGHLIGHT, -1, YELLOW)

    def test_zero_index_accepted(self) -> None:
        store = AnnotationStore()
        store.add_index(Style.UNDERLINE, 0, YELLOW)
        assert store.indices == [IndexAnnotation(Style.UNDERLINE, 0, YELLOW)]

    @pytest.mark.parametrize("style,color", [(None, YELLOW), (Style.HIGHLIGHT, None)])
    def test_missing_style_or_color_rejected(self, style, color) -> None:
        store = AnnotationStore()
        with pytest.raises(InvalidArgumentError):
            store.add_substring(style, "x", color)
        with pytest.raises(InvalidArgumentError):
            store.add_index(style, 0, color)
        assert store.is_empty()

    def test_non_integer_index_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            AnnotationStore().add_index(Style.HIGHLIGHT, 1.5, YELLOW)

    def test_add_notifies_clear_does_not(self) -> None:
        calls = []
        store = AnnotationStore(on_change=lambda: calls.append(1))
        store.add_substring(Style.HIGHLIGHT, "a", YELLOW)
        store.add_index(Style.HIGHLIGHT, 2, YELLOW)
        assert len(calls) == 2
        store.clear_substrings()
        store.clear_indices()
        assert len(calls) == 2

    def test_rejected_add_does_not_notify(self) -> None:
        calls = []
        store = AnnotationStore(on_change=lambda: calls.append(1))
        with pytest.raises(InvalidArgumentError):
            store.add_index(Style.HIGHLIGHT, -3, YELLOW)
        assert calls == []

    def test_lists_are_independent(self) -> None:
        store = AnnotationStore()
        store.add_substring(Style.HIGHLIGHT, "a", YELLOW)
        store.add_index(Style.UNDERLINE, 1, YELLOW)
        store.clear_substrings()
        assert store.substrings == []
        assert len(store.indices) == 1
        store.add_substring(Style.HIGHLIGHT, "b", YELLOW)
        store.clear_indices()
        assert len(store.substrings) == 1
        assert not store.is_empty()

    def test_returned_lists_are_copies(self) -> None:
        store = AnnotationStore()
        store.add_index(Style.HIGHLIGHT, 0, YELLOW)
        store.indices.clear()
        assert len(store.indices) == 1

    def test_annotations_are_immutable(self) -> None:
        annotation = AnnotationStore().add_index(Style.HIGHLIGHT, 0, YELLOW)
        with pytest.raises(AttributeError):
            annotation.index = 3
