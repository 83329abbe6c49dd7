"""Tests for namespace flattening."""

from __future__ import annotations

from csdl_render.flattener import (
    expand_namespaces,
    flatten_namespaces,
    has_renderable_children,
    is_excluded,
)
from csdl_render.identifiers import namespace_string
from csdl_render.types import EnumType, Interface, Model, Namespace, Operation, UnionType


def _names(namespaces: list[Namespace]) -> list[str]:
    return [namespace_string(ns) for ns in namespaces]


class TestExpandNamespaces:
    def test_pre_order(self) -> None:
        """Test parents come before children, children in declared order."""
        root = Namespace()
        a = root.child("A")
        a.child("A1")
        a.child("A2")
        root.child("B")

        assert _names(expand_namespaces(root)) == ["", "A", "A.A1", "A.A2", "B"]


class TestHasRenderableChildren:
    def test_empty(self) -> None:
        assert not has_renderable_children(Namespace(name="Unused"))

    def test_union_only_is_not_renderable(self) -> None:
        namespace = Namespace(name="Types")
        namespace.add(UnionType(name="Choice"))
        assert not has_renderable_children(namespace)

    def test_members(self) -> None:
        for member in (
            Model(name="M"),
            EnumType(name="E"),
            Interface(name="I"),
            Operation(name="o"),
        ):
            namespace = Namespace(name="N")
            namespace.add(member)
            assert has_renderable_children(namespace)


class TestFlattenNamespaces:
    """Tests for flatten_namespaces."""

    def test_skips_root_and_empty(self) -> None:
        root = Namespace()
        root.add(Model(name="Orphan"))
        zoo = root.child("Zoo")
        zoo.add(Model(name="Pet"))
        zoo.child("Unused")

        assert _names(flatten_namespaces(root)) == ["Zoo"]

    def test_excludes_cadl_by_default(self) -> None:
        root = Namespace()
        root.child("Cadl").add(Model(name="string"))
        root.child("Zoo").add(Model(name="Pet"))

        assert _names(flatten_namespaces(root)) == ["Zoo"]

    def test_exclusion_is_inherited(self) -> None:
        """Test descendants of an excluded namespace are excluded too."""
        root = Namespace()
        internal = root.child("Internal")
        internal.add(Model(name="Secret"))
        internal.child("Nested").add(Model(name="AlsoSecret"))
        root.child("Public").add(Model(name="Visible"))

        names = _names(flatten_namespaces(root, excluded=["Internal"]))

        assert names == ["Public"]

    def test_prefix_exclusion(self) -> None:
        root = Namespace()
        root.child("CadlExtras").add(Model(name="X"))
        root.child("Zoo").add(Model(name="Pet"))

        assert _names(flatten_namespaces(root)) == ["Zoo"]
        assert _names(flatten_namespaces(root, excluded=[])) == ["CadlExtras", "Zoo"]

    def test_nested_order(self) -> None:
        root = Namespace()
        microsoft = root.child("Microsoft")
        microsoft.add(Model(name="Base"))
        graph = microsoft.child("Graph")
        graph.add(Model(name="User"))
        microsoft.child("Empty").child("Deep").add(EnumType(name="Level"))

        assert _names(flatten_namespaces(root)) == [
            "Microsoft",
            "Microsoft.Graph",
            "Microsoft.Empty.Deep",
        ]

    def test_is_excluded(self) -> None:
        assert is_excluded("Cadl.Http", ["Cadl"])
        assert not is_excluded("Zoo", ["Cadl"])
        assert not is_excluded("Zoo", [])
