from .graph import GraphNode, GraphEdge, NodeBadge, LegendEntry, NetworkGraphView

__all__ = ['GraphNode', 'GraphEdge', 'NodeBadge', 'LegendEntry', 'NetworkGraphView']
