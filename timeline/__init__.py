from .export import mobility_frames, write_mobility
from .state import MobilityFrame, TimelineSnapshot, TimelineState, in_window, load_graph_data, load_positions

__all__ = [
    "mobility_frames",
    "write_mobility",
    "MobilityFrame",
    "TimelineSnapshot",
    "TimelineState",
    "in_window",
    "load_graph_data",
    "load_positions",
]
