from .mermaid import count_edge_lines, output_size, scale_factor, to_mermaid

__all__ = ["count_edge_lines", "output_size", "scale_factor", "to_mermaid"]
