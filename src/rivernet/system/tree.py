from rivernet.node import WaterNode

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


def render_tree(root: WaterNode) -> str:
    """Draw ``root`` and everything feeding it, one line per node.

    A node met again on its own branch is printed as ``[cycle <name>]``
    and not expanded further.
    """
    lines = [root.label()]
    _render_inflows(root, "", lines, {root})
    return "\n".join(lines) + "\n"


def _render_inflows(node: WaterNode, prefix: str, lines: list[str], printing: set[WaterNode]) -> None:
    for i, child in enumerate(node.inflows):
        last = i == len(node.inflows) - 1
        connector = LAST_BRANCH if last else BRANCH
        if child in printing:
            lines.append(f"{prefix}{connector}[cycle {child.name}]")
            continue
        lines.append(f"{prefix}{connector}{child.label()}")
        printing.add(child)
        _render_inflows(child, prefix + (SPACE if last else PIPE), lines, printing)
        printing.discard(child)
