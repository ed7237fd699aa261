from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt
import networkx as nx
import seaborn as sns

from rivernet.node import Dam, River, WaterNode

from .result import DetailedResult

if TYPE_CHECKING:
    from .network import WaterNetwork

NODE_COLORS: dict[type, str] = {
    River: "#3498db",
    Dam: "#27ae60",
}

NODE_SIZES: dict[type, int] = {
    River: 500,
    Dam: 700,
}

NODE_LABELS: dict[type, str] = {
    River: "River",
    Dam: "Dam",
}


def visualize_network(
    network: WaterNetwork,
    *,
    save_to: str | Path | None = None,
    figsize: tuple[float, float] = (12, 8),
    title: str | None = None,
) -> tuple[plt.Figure, plt.Axes]:
    if len(network) == 0:
        raise ValueError("Network has no nodes. Cannot visualize.")

    graph = network.to_networkx()
    pos = _compute_positions(graph)

    fig, ax = plt.subplots(figsize=figsize)

    handles = _draw_nodes(graph, pos, network, ax)
    nx.draw_networkx_edges(graph, pos, ax=ax, edge_color="#7f8c8d", arrows=True, arrowsize=15, width=1.5)
    nx.draw_networkx_labels(graph, pos, ax=ax, font_size=9, font_weight="bold")

    if title is not None:
        ax.set_title(title)
    else:
        ax.set_title(f"Water Network ({graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges)")

    ax.legend(handles=handles, loc="best")
    ax.set_axis_off()
    plt.tight_layout()

    if save_to:
        fig.savefig(save_to, dpi=150, bbox_inches="tight")

    return fig, ax


def _compute_positions(graph: nx.DiGraph) -> dict[str, Any]:
    if not nx.is_directed_acyclic_graph(graph):
        return nx.spring_layout(graph, seed=0)
    # sources on top, outlets at the bottom
    for layer, names in enumerate(nx.topological_generations(graph)):
        for name in names:
            graph.nodes[name]["layer"] = -layer
    return nx.multipartite_layout(graph, subset_key="layer", align="horizontal")


def _draw_nodes(
    graph: nx.DiGraph,
    pos: dict[str, Any],
    network: WaterNetwork,
    ax: plt.Axes,
) -> list[Any]:
    groups: dict[type, list[str]] = {}
    for node in network:
        groups.setdefault(type(node), []).append(node.name)

    handles: list[Any] = []
    for node_type, names in groups.items():
        collection = nx.draw_networkx_nodes(
            graph,
            pos,
            nodelist=names,
            node_color=NODE_COLORS.get(node_type, "#7f8c8d"),
            node_size=NODE_SIZES.get(node_type, 500),
            label=NODE_LABELS.get(node_type, node_type.__name__),
            ax=ax,
        )
        handles.append(collection)

    return handles


def plot_results(
    result: DetailedResult,
    nodes: Iterable[WaterNode] | None = None,
    *,
    save_to: str | Path | None = None,
    figsize: tuple[float, float] = (12, 8),
) -> tuple[plt.Figure, Any]:
    """Outflow and storage hydrographs, one line per node."""
    selected = list(nodes) if nodes is not None else result.nodes
    if not selected:
        raise ValueError("No nodes to plot.")

    sns.set_context("paper", font_scale=1.3)
    fig, (ax_out, ax_store) = plt.subplots(2, 1, figsize=figsize, sharex=True)
    days = range(1, result.days + 1)

    for node in selected:
        ax_out.plot(days, result.outflow(node), marker="o", label=node.name)
        ax_store.plot(days, result.storage(node), marker="s", label=node.name)

    ax_out.set_ylabel("Outflow [ML/day]")
    ax_out.set_title("Outflow")
    ax_out.legend(loc="best")
    ax_store.set_ylabel("Storage [ML]")
    ax_store.set_xlabel("Day")
    ax_store.set_title("Storage (after outflow)")
    for ax in (ax_out, ax_store):
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    sns.despine(fig=fig)

    if save_to:
        fig.savefig(save_to, dpi=150, bbox_inches="tight")

    return fig, (ax_out, ax_store)
