from chart_layout.adapters import aggregate_points, check_records, normalize_points, sort_points, transform_records
from chart_layout.api import BarGeometry, ChartGeometry, chart_geometry
from chart_layout.errors import (
    ChartConfigError,
    ChartDataError,
    LayoutLookupError,
    ScaleLookupError,
    SeriesLookupError,
    StackLookupError,
    UnsupportedVariantError,
)
from chart_layout.layout import (
    GroupedLayout,
    calculate_bar_dimensions,
    calculate_column_dimensions,
    calculate_column_value_scale,
    calculate_grouped_layout,
    calculate_value_scale,
    get_bar_position,
    get_column_position,
    get_grouped_bar_position,
    get_grouped_color_scheme,
    get_grouped_scale,
)
from chart_layout.orientation import (
    LabelRotation,
    get_optimal_orientation,
    get_recommended_dimensions,
    should_rotate_labels,
    should_use_horizontal,
)
from chart_layout.points import DataPoint, Rect, Series
from chart_layout.registry import DataSeriesManager, SeriesStatistics, ValueRange
from chart_layout.scales import BandScale, LinearScale
from chart_layout.stacking import (
    StackedChartLayout,
    StackLayout,
    calculate_stack_totals,
    calculate_stacked_layout,
    get_stacked_bar_position,
    stack_series,
    stacked_points,
)
from chart_layout.validation import ValidationReport, validate_points
from chart_layout.variants import (
    ChartVariant,
    create_chart_variant,
    get_recommended_variant,
    get_variant_component,
    validate_variant_data,
)

__all__ = [
    "BandScale",
    "BarGeometry",
    "ChartConfigError",
    "ChartDataError",
    "ChartGeometry",
    "ChartVariant",
    "DataPoint",
    "DataSeriesManager",
    "GroupedLayout",
    "LabelRotation",
    "LayoutLookupError",
    "LinearScale",
    "Rect",
    "ScaleLookupError",
    "Series",
    "SeriesLookupError",
    "SeriesStatistics",
    "StackLayout",
    "StackLookupError",
    "StackedChartLayout",
    "UnsupportedVariantError",
    "ValidationReport",
    "ValueRange",
    "aggregate_points",
    "calculate_bar_dimensions",
    "calculate_column_dimensions",
    "calculate_column_value_scale",
    "calculate_grouped_layout",
    "calculate_stack_totals",
    "calculate_stacked_layout",
    "calculate_value_scale",
    "chart_geometry",
    "check_records",
    "create_chart_variant",
    "get_bar_position",
    "get_column_position",
    "get_grouped_bar_position",
    "get_grouped_color_scheme",
    "get_grouped_scale",
    "get_optimal_orientation",
    "get_recommended_dimensions",
    "get_recommended_variant",
    "get_stacked_bar_position",
    "get_variant_component",
    "normalize_points",
    "should_rotate_labels",
    "should_use_horizontal",
    "sort_points",
    "stack_series",
    "stacked_points",
    "transform_records",
    "validate_points",
    "validate_variant_data",
]
