from chart_layout.adapters.records import aggregate_points, check_records, normalize_points, sort_points, transform_records

__all__ = [
    "aggregate_points",
    "check_records",
    "normalize_points",
    "sort_points",
    "transform_records",
]
