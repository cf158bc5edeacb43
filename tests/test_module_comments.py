"""Tests for module comment selection across merged declarations."""

from __future__ import annotations

import itertools

import pytest

from docreflect.comments.modules import (
    ModuleCommentCandidate,
    ModuleCommentSelector,
    is_preferred_text,
    should_replace,
)
from docreflect.models.reflections import DeclarationReflection, ReflectionKind


def _module(name="Mod"):
    return DeclarationReflection(name, ReflectionKind.Module)


class TestPreference:
    def test_first_candidate_is_stored(self):
        selector = ModuleCommentSelector()
        module = _module()
        assert selector.record("/** short */", module) is True
        assert module.id in selector
        assert selector.get(module.id).full_text == "/** short */"

    def test_longer_text_replaces_shorter(self):
        selector = ModuleCommentSelector()
        module = _module()
        selector.record("/** short */", module)
        assert selector.record("/** a much longer block */", module) is True
        assert selector.get(module.id).full_text == "/** a much longer block */"

    def test_shorter_text_does_not_replace(self):
        selector = ModuleCommentSelector()
        module = _module()
        selector.record("/** a much longer block */", module)
        assert selector.record("/** short */", module) is False
        assert selector.get(module.id).full_text == "/** a much longer block */"

    @pytest.mark.parametrize("order", list(itertools.permutations(range(3))))
    def test_preferred_candidate_wins_regardless_of_order(self, order):
        candidates = [
            "/** short */",
            "/** a much longer block */",
            "/** final @preferred */",
        ]
        selector = ModuleCommentSelector()
        module = _module()
        for i in order:
            selector.record(candidates[i], module)

        stored = selector.get(module.id)
        assert stored.is_preferred is True
        assert stored.full_text == "/** final @preferred */"

    def test_equal_length_keeps_first(self):
        selector = ModuleCommentSelector()
        module = _module()
        selector.record("/** aaaa */", module)
        assert selector.record("/** bbbb */", module) is False
        assert selector.get(module.id).full_text == "/** aaaa */"

    def test_later_preferred_replaces_earlier_preferred(self):
        selector = ModuleCommentSelector()
        module = _module()
        selector.record("/** first and long @preferred */", module)
        selector.record("/** two @Preferred */", module)
        assert selector.get(module.id).full_text == "/** two @Preferred */"

    def test_empty_text_is_ignored(self):
        selector = ModuleCommentSelector()
        assert selector.record("", _module()) is False
        assert len(selector) == 0

    def test_candidates_are_per_reflection(self):
        selector = ModuleCommentSelector()
        a, b = _module("A"), _module("B")
        selector.record("/** about A */", a)
        selector.record("/** about B, longer */", b)
        assert selector.get(a.id).full_text == "/** about A */"
        assert len(selector) == 2

    def test_preferred_marker_is_case_insensitive(self):
        assert is_preferred_text("/** @PREFERRED */")
        assert not is_preferred_text("/** preferred */")


class TestShouldReplace:
    def test_stored_preferred_blocks_plain_text(self):
        stored = ModuleCommentCandidate(_module(), "x", True)
        assert should_replace(stored, "much longer text", False) is False
        assert should_replace(stored, "y", True) is True


class TestFinalize:
    def test_finalize_assigns_parsed_comment_without_preferred_tag(self):
        selector = ModuleCommentSelector()
        module = _module()
        selector.record("/**\n * Utilities.\n * @preferred\n * @since 2.0\n */", module)

        assert selector.finalize() == 1
        assert module.comment.short_text == "Utilities."
        assert [t.tag_name for t in module.comment.tags] == ["since"]

    def test_finalize_empties_the_table(self):
        selector = ModuleCommentSelector()
        module = _module()
        selector.record("/** doc */", module)
        selector.finalize()

        assert len(selector) == 0
        assert module.id not in selector
        assert selector.finalize() == 0
