from pathlib import Path

import networkx as nx
from matplotlib import pyplot as plt

from grammarkit.lr0 import CanonicalCollection


def draw_automaton(collection: CanonicalCollection, path: str | Path | None = None, show: bool = False):
    """Draws the LR(0) automaton. Saves it to `path` when given.

    Returns the matplotlib figure. Unless `show` is set the figure is closed
    in pyplot, so repeated calls do not pile up open figures.
    """
    graph = collection.to_graph()

    # BFS layers from I0 keep the drawing left to right
    layers = nx.single_source_shortest_path_length(graph, 0) if graph else {}
    for node in graph.nodes:
        graph.nodes[node]["layer"] = layers.get(node, max(layers.values(), default=0) + 1)
    pos = nx.multipartite_layout(graph, subset_key="layer") if graph else {}

    fig, ax = plt.subplots(figsize=(max(6, 1.5 * len(graph)), 6))
    nx.draw(graph, pos, ax=ax, arrows=True, node_shape="o", node_size=1500, alpha=0.4)
    nx.draw_networkx_labels(graph, pos, ax=ax, labels={k: v["label"] for k, v in graph.nodes.items()})
    nx.draw_networkx_edge_labels(
        graph, pos, ax=ax, edge_labels={(u, v): d["symbol"] for u, v, d in graph.edges(data=True)}
    )

    if path is not None:
        fig.savefig(path)
    if show:
        plt.show()
    else:
        plt.close(fig)
    return fig
