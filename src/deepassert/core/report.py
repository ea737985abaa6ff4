"""Human-readable rendering of failed locations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from deepassert.core.location import FieldLocation

ROOT_LABEL = "<root>"


def describe_root(root: Any) -> str:
    return f"{type(root).__qualname__} object"


def failure_tree(root: Any, failures: Sequence[FieldLocation]) -> Tree:
    """Group failed locations by shared segments under a tree rooted at ``root``.

    Failed nodes are shown in bold red; intermediate segments stay plain.
    """
    tree = Tree(describe_root(root))
    branches: dict[tuple[str, ...], Tree] = {(): tree}
    failed = {tuple(location.segments) for location in failures}

    for location in failures:
        if location.is_root:
            tree.label = f"[bold red]{describe_root(root)}[/bold red]"
            continue
        prefix: tuple[str, ...] = ()
        for segment in location.segments:
            parent = branches[prefix]
            prefix = (*prefix, segment)
            if prefix not in branches:
                label = escape(segment)
                if prefix in failed:
                    label = f"[bold red]{label}[/bold red]"
                branches[prefix] = parent.add(label)
    return tree


def format_failures(root: Any, failures: Sequence[FieldLocation]) -> str:
    """Plain-text listing plus tree, suitable for an assertion message."""
    console = Console(width=120, color_system=None, force_terminal=False)
    with console.capture() as capture:
        console.print(f"{len(failures)} field(s) failed the recursive assertion:")
        for location in failures:
            console.print(f"  - {escape(location.path or ROOT_LABEL)}", highlight=False)
        console.print(failure_tree(root, failures))
    return capture.get().rstrip()

