#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the fragment model."""
import pytest

from refold.ast import Flag, SourceFile
from refold.exceptions import PartitionError
from refold.regeneration import (
    FlagFragment,
    LayoutFragment,
    Requisite,
    ScopeFragment,
    SourceFragment,
    check_well_formed,
    dump,
)

SOURCE = SourceFile("test.src", "f(a, b)")


@pytest.mark.unit
class TestRequisite:
    """Test Requisite matching."""

    def test_match_text_satisfies(self):
        assert Requisite(",", ", ").is_satisfied_by(" , ")

    def test_alternative_satisfies(self):
        newline = Requisite("\n", "\n", (";",))
        assert newline.is_satisfied_by("; ")
        assert not newline.is_satisfied_by(" ")

    def test_requisites_compare_by_value(self):
        assert Requisite(",", ", ") == Requisite(",", ", ")


@pytest.mark.unit
class TestFragment:
    """Test fragment keys, text and requisite lists."""

    def test_positioned_fragment_has_key_and_text(self):
        leaf = SourceFragment(2, 3, SOURCE)
        assert leaf.key == (id(SOURCE), 2, 3)
        assert leaf.text == "a"
        assert not leaf.is_synthetic

    def test_synthetic_fragment_has_no_key(self):
        leaf = SourceFragment(literal="()")
        assert leaf.key is None
        assert leaf.text == ""
        assert leaf.is_synthetic

    def test_requisites_are_not_duplicated(self):
        leaf = SourceFragment(2, 3, SOURCE)
        leaf.require_after(Requisite(",", ", "))
        leaf.require_after(Requisite(",", ", "))
        leaf.require_before(Requisite("(", "("))
        assert leaf.after == [Requisite(",", ", ")]
        assert leaf.before == [Requisite("(", "(")]

    def test_fragments_compare_by_identity(self):
        assert SourceFragment(2, 3, SOURCE) != SourceFragment(2, 3, SOURCE)

    def test_repr(self):
        assert repr(SourceFragment(2, 3, SOURCE)) == "SourceFragment(2:3)"
        assert repr(LayoutFragment(3, 5, SOURCE)) == "LayoutFragment(', ')"
        assert repr(FlagFragment(flags=(Flag.PRIVATE,))) == "FlagFragment(private)"


@pytest.mark.unit
class TestScopeFragment:
    """Test scope construction and walking."""

    def build(self) -> ScopeFragment:
        root = ScopeFragment(0, 7, SOURCE)
        root.add(SourceFragment(0, 1, SOURCE))
        args = ScopeFragment(1, 7, SOURCE, delimited=True)
        root.add(args)
        args.add(SourceFragment(2, 3, SOURCE))
        args.add(SourceFragment(5, 6, SOURCE))
        return root

    def test_add_sets_parent(self):
        root = self.build()
        assert root.children[1].parent is root
        assert root.last_child is root.children[1]

    def test_walk_is_parents_first(self):
        root = self.build()
        texts = [f.text for f in root.walk()]
        assert texts == ["f(a, b)", "f", "(a, b)", "a", "b"]

    def test_leaves(self):
        assert [f.text for f in self.build().leaves()] == ["f", "a", "b"]

    def test_copy_has_no_children(self):
        root = self.build()
        root.require_after(Requisite("\n", "\n"))
        copy = root.copy()
        assert copy.children == []
        assert copy.after == root.after
        assert copy.after is not root.after

    def test_same_span(self):
        assert self.build().same_span(0, 7, SOURCE)
        assert not self.build().same_span(0, 6, SOURCE)

    def test_dump_outlines_tree(self):
        outline = dump(self.build())
        assert outline.splitlines()[0].startswith("ScopeFragment(0:7")
        assert "  ScopeFragment(1:7" in outline
        assert "SourceFragment(2:3) 'a'" in outline


@pytest.mark.unit
class TestWellFormed:
    """Test check_well_formed."""

    def test_ordered_tree_passes(self):
        root = ScopeFragment(0, 7, SOURCE)
        root.add(SourceFragment(0, 1, SOURCE))
        root.add(SourceFragment(literal="x"))
        root.add(SourceFragment(2, 3, SOURCE))
        check_well_formed(root)

    def test_overlap_fails(self):
        root = ScopeFragment(0, 7, SOURCE)
        root.add(SourceFragment(0, 3, SOURCE))
        root.add(SourceFragment(2, 4, SOURCE))
        with pytest.raises(PartitionError, match="overlaps"):
            check_well_formed(root)

    def test_child_outside_scope_fails(self):
        root = ScopeFragment(0, 7, SOURCE)
        inner = ScopeFragment(1, 3, SOURCE)
        root.add(inner)
        inner.add(SourceFragment(2, 5, SOURCE))
        with pytest.raises(PartitionError, match="not contained"):
            check_well_formed(root)
