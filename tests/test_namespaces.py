"""Tests for jsonws.namespaces."""

from __future__ import annotations

from jsonws.namespaces import ancestors, namespace_of, namespace_paths, split_name


class TestNames:
    def test_namespace_of(self) -> None:
        assert namespace_of("a.b.c") == "a.b"
        assert namespace_of("top") == ""

    def test_split_name(self) -> None:
        assert split_name("a.b.c") == ("a.b", "c")
        assert split_name("top") == ("", "top")

    def test_ancestors(self) -> None:
        assert ancestors("a.b.c") == ["a", "a.b"]
        assert ancestors("top") == []


class TestNamespacePaths:
    """Distinct implied namespaces, parents first."""

    def test_first_appearance_order(self) -> None:
        assert namespace_paths(["x.y.m", "a.n", "x.z.m", "top"]) == ["x", "x.y", "a", "x.z"]

    def test_parent_precedes_child(self) -> None:
        """Every path appears after its parent, whatever the input order."""
        names = ["p.q.r.s.m", "p.m", "z.q.m", "p.q.n", "z.m"]
        paths = namespace_paths(names)

        assert len(paths) == len(set(paths))
        for path in paths:
            parent = namespace_of(path)
            if parent:
                assert paths.index(parent) < paths.index(path)

    def test_no_namespaces(self) -> None:
        assert namespace_paths(["a", "b"]) == []
