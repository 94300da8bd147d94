"""
Store Rendering
===============

Debug view of a PathStore as a rich Tree: one branch per container, its data
underneath, and the watched paths marked with their listener count.

Usage:
    from rich.console import Console
    Console().print(render_store(store))
"""

from typing import Any, Dict

from rich.text import Text
from rich.tree import Tree

from pathstore.util import tree as tree_ops

MAX_SCALAR_WIDTH = 60


def _label(key: str, value: Any, watched: Dict[str, int], path: str) -> Text:
    label = Text(str(key), style="bold cyan")
    if not (tree_ops.is_mapping(value) or tree_ops.is_sequence(value)):
        shown = repr(value)
        if len(shown) > MAX_SCALAR_WIDTH:
            shown = shown[: MAX_SCALAR_WIDTH - 3] + "..."
        label.append(" = ")
        label.append(shown, style="green")
    if path in watched:
        label.append(f"  ({watched[path]} listener(s))", style="yellow")
    return label


def _add_children(branch: Tree, node: Any, path: str, watched: Dict[str, int]):
    if tree_ops.is_mapping(node):
        items = ((str(key), value) for key, value in node.items())
    elif tree_ops.is_sequence(node):
        items = ((str(index), value) for index, value in enumerate(node))
    else:
        return

    for key, value in items:
        child_path = f"{path}.{key}"
        sub = branch.add(_label(key, value, watched, child_path))
        _add_children(sub, value, child_path, watched)


def render_container(store, container_id: str) -> Tree:
    """Render one container and its watched paths."""
    watched = {
        path: len(signal) for path, signal in store.signals(container_id).items()
    }
    root = Tree(_label(container_id, {}, watched, container_id))
    _add_children(root, store.get(container_id), container_id, watched)
    return root


def render_store(store, title: str = "PathStore") -> Tree:
    """Render every container of ``store`` under a single root."""
    root = Tree(Text(title, style="bold magenta"))
    for container_id in store.ids():
        root.add(render_container(store, container_id))
    return root
