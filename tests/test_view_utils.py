"""
Tests for hit testing and element refresh.
"""

from fakes import node
from uiflow_core.geometry import Bounds, Point, parse_bounds
from uiflow_core.tree import TreeNode
from uiflow_core.view_utils import get_element_at, is_visible, refresh_element


class TestGeometry:
    """Tests for bounds parsing and geometry helpers."""

    def test_parse_bounds(self):
        """Should parse the bracketed bounds encoding."""
        b = parse_bounds("[10,20][110,70]")
        assert b == Bounds(10, 20, 100, 50)
        assert b.center() == Point(60, 45)

    def test_parse_negative_and_malformed(self):
        """Should accept negatives and reject malformed text."""
        assert parse_bounds("[-10,0][10,10]") == Bounds(-10, 0, 20, 10)
        assert parse_bounds("10,20,30,40") is None
        assert parse_bounds("") is None
        assert parse_bounds(None) is None

    def test_contains_is_inclusive(self):
        """Should include all four edges."""
        b = Bounds(0, 0, 10, 10)
        assert b.contains(0, 0)
        assert b.contains(10, 10)
        assert not b.contains(11, 5)

    def test_clip_to_screen(self):
        """Should clip to the screen and drop off-screen bounds."""
        assert Bounds(-10, -10, 30, 30).clip(100, 100) == Bounds(0, 0, 20, 20)
        assert Bounds(200, 200, 10, 10).clip(100, 100) is None


class TestGetElementAt:
    """Tests for topmost hit testing."""

    def test_later_sibling_wins_when_overlapping(self):
        """Should prefer the later sibling."""
        first = node(text="first", bounds=(0, 0, 100, 100))
        second = node(text="second", bounds=(0, 0, 100, 100))
        root = node(bounds=(0, 0, 100, 100), children=[first, second])

        assert get_element_at(root, 50, 50) is second

    def test_descends_into_children_first(self):
        """Should return the deepest topmost node."""
        leaf = node(text="leaf", bounds=(10, 10, 20, 20))
        container = node(bounds=(0, 0, 100, 100), children=[leaf])
        root = node(children=[container])

        assert get_element_at(root, 15, 15) is leaf
        assert get_element_at(root, 50, 50) is container

    def test_node_without_bounds_never_matches_itself(self):
        """Should skip nodes without bounds."""
        leaf = node(text="leaf", bounds=(0, 0, 10, 10))
        group = node(children=[leaf])
        root = node(children=[group])

        assert get_element_at(root, 5, 5) is leaf
        assert get_element_at(root, 50, 50) is None

    def test_root_is_never_returned(self):
        """Should only return descendants."""
        root = node(bounds=(0, 0, 100, 100))
        assert get_element_at(root, 5, 5) is None


class TestIsVisible:
    """Tests for is_visible."""

    def test_false_without_bounds(self):
        """Should be invisible without bounds."""
        target = node(text="no bounds")
        root = node(bounds=(0, 0, 100, 100), children=[target])
        assert is_visible(root, target) is False

    def test_visible_when_topmost(self):
        """Should be visible when nothing covers the center."""
        target = node(text="button", bounds=(0, 0, 50, 50))
        root = node(bounds=(0, 0, 100, 100), children=[target])
        assert is_visible(root, target) is True

    def test_covered_node_is_not_visible(self):
        """Should be invisible when a later sibling covers it."""
        target = node(text="button", bounds=(0, 0, 50, 50))
        overlay = node(text="dialog", bounds=(0, 0, 100, 100))
        root = node(bounds=(0, 0, 100, 100), children=[target, overlay])

        assert is_visible(root, target) is False
        assert is_visible(root, overlay) is True

    def test_identity_not_equality(self):
        """Should compare the hit by identity."""
        target = node(text="button", bounds=(0, 0, 50, 50))
        twin = node(text="button", bounds=(0, 0, 50, 50))
        root = node(bounds=(0, 0, 100, 100), children=[twin])
        assert is_visible(root, target) is False


class TestRefreshElement:
    """Tests for refresh_element."""

    def test_finds_node_after_bounds_moved(self):
        """Should ignore bounds when matching."""
        old = node(text="OK", id="ok_button", bounds=(0, 0, 10, 10))
        moved = node(text="OK", id="ok_button", bounds=(50, 50, 60, 60))
        fresh_root = node(bounds=(0, 0, 100, 100), children=[node(text="other"), moved])

        found = refresh_element(fresh_root, old)
        assert found is moved

    def test_returns_none_when_missing(self):
        """Should return None when no node matches."""
        old = node(text="OK", bounds=(0, 0, 10, 10))
        fresh_root = node(children=[node(text="Cancel", bounds=(0, 0, 10, 10))])
        assert refresh_element(fresh_root, old) is None

    def test_ancestor_match_preferred(self):
        """Should search pre-order."""
        outer = node(text="same", bounds=(0, 0, 100, 100))
        inner = node(text="same", bounds=(10, 10, 20, 20))
        outer.children.append(inner)
        root = node(children=[outer])

        assert refresh_element(root, node(text="same")) is outer

    def test_other_attribute_changes_break_identity(self):
        """Should not match when other attributes differ."""
        old = node(text="OK", checked="false", bounds=(0, 0, 10, 10))
        fresh_root = node(children=[node(text="OK", checked="true", bounds=(0, 0, 10, 10))])
        assert refresh_element(fresh_root, old) is None


class TestTreeNode:
    """Tests for tree flattening and serialization."""

    def test_aggregate_is_pre_order(self):
        """Should list each node before its children."""
        a1 = node(text="a1")
        a = node(text="a", children=[a1])
        b = node(text="b")
        root = node(children=[a, b])

        flat = root.aggregate()

        assert [n is x for n, x in zip(flat, [root, a, a1, b])] == [True] * 4
        assert len(root.flatten()) == 4

    def test_dict_round_trip_keeps_structure(self):
        """Should rebuild an equivalent tree from plain data."""
        root = node(bounds=(0, 0, 10, 10), children=[node(text="OK", id="btn")])

        rebuilt = TreeNode.from_dict(root.to_dict())

        assert rebuilt is not root
        assert rebuilt.same_node(root)
        assert rebuilt.children[0].attributes == {"text": "OK", "resource-id": "btn"}
        assert rebuilt.to_dict() == root.to_dict()
