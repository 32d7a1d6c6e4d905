"""Tree rendering utilities."""

from typing import Dict, Optional

from rich.markup import escape
from rich.tree import Tree as RichTree

from gitscope.services.git.tree import Tree
from gitscope.utils.text import join_path


def tree_renderable(tree: Tree, label: Optional[str] = None) -> RichTree:
    """
    Build a Rich tree mirroring a git tree, loading subtrees as it goes.

    Args:
        tree: Tree to render
        label: Root label (defaults to the tree's name or id)

    Returns:
        rich.tree.Tree with directories before files at every level
    """
    root = RichTree(escape(label or tree.name or str(tree.id)))
    nodes: Dict[Optional[str], RichTree] = {}

    def add(name, path, trees, blobs):
        node = nodes.get(path, root)
        for subtree in sorted(trees):
            child_path = join_path(path, subtree.name)
            nodes[child_path] = node.add(f"[bold blue]{escape(subtree.name)}/[/bold blue]")
        for blob in sorted(blobs):
            node.add(escape(blob.name))

    tree.walk(add)
    return root
