from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'sectors': 0,
        'rooms_standard': 0,
        'rooms_dummy': 0,
        'rooms_merged': 0,
        'edges_candidate': 0,
        'edges_tree': 0,
        'edges_extra': 0,
        'edges_absorbed': 0,
        'hallways_routed': 0,
        'routing_relaxations': 0,
        'tiles_floor': 0,
        'tiles_hallway': 0,
        'tiles_wall': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
