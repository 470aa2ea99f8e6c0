import pytest

from boxtrack.domain.value_objects.path import MaterializedPath


class TestMaterializedPath:
    def test_root_has_depth_one(self):
        path = MaterializedPath.root("a")

        assert path.depth == 1
        assert path.parent_id is None
        assert path.ancestor_ids == ()
        assert str(path) == "a"

    def test_parse_and_child(self):
        path = MaterializedPath.parse("a.b").child("c")

        assert str(path) == "a.b.c"
        assert path.depth == 3
        assert path.leaf == "c"
        assert path.parent_id == "b"
        assert path.ancestor_ids == ("a", "b")

    @pytest.mark.parametrize("value", ["", "a..b", ".a", "a."])
    def test_rejects_empty_segments(self, value):
        with pytest.raises(ValueError):
            MaterializedPath.parse(value)

    def test_contains_checks_whole_segments(self):
        path = MaterializedPath.parse("abc.def")

        assert path.contains("abc")
        assert not path.contains("ab")

    def test_is_within(self):
        parent = MaterializedPath.parse("a.b")

        assert MaterializedPath.parse("a.b").is_within(parent)
        assert MaterializedPath.parse("a.b.c.d").is_within(parent)
        assert not MaterializedPath.parse("a.bc").is_within(parent)
        assert not MaterializedPath.parse("a").is_within(parent)

    def test_rebase_moves_subtree(self):
        """
        GIVEN a node at a.b.c.d
        WHEN its ancestor a.b is moved under x
        THEN the node path is rewritten to x.b.c.d
        """
        node = MaterializedPath.parse("a.b.c.d")

        rebased = node.rebase(MaterializedPath.parse("a.b"), MaterializedPath.parse("x.b"))

        assert str(rebased) == "x.b.c.d"
        assert rebased.depth == 4

    def test_rebase_outside_prefix_fails(self):
        with pytest.raises(ValueError):
            MaterializedPath.parse("q.r").rebase(
                MaterializedPath.parse("a"), MaterializedPath.parse("b")
            )

    def test_subtree_like_pattern_excludes_self(self):
        assert MaterializedPath.parse("a.b").subtree_like_pattern() == "a.b.%"
