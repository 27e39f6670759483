"""
Columnar Inspector
==================

Storage statistics for columnar containers, computed from page, cluster and
field metadata without decoding any values.

Usage:
    from columnar_inspector import Inspector, ColumnType, ReportFormat

    inspector = Inspector.from_source("events", "events.meta.yaml")

    print(inspector.compression_settings_as_string)
    print(inspector.get_field_stats("jets._0.pt").compressed_size)

    inspector.print_column_type_info(ReportFormat.CSV)
    hist = inspector.get_page_size_distribution_for_type(ColumnType.SPLIT_REAL32)

Python: 3.10+
"""

from __future__ import annotations

__version__ = "0.1.0"
__all__ = [
    # Main inspector
    "Inspector",
    "InspectorConfig",

    # Statistics
    "ColumnStats",
    "FieldStats",
    "ColumnCollection",
    "ColumnTypeTotals",
    "collect_column_stats",
    "aggregate_field_tree",
    "index_field_tree",

    # Distributions and reports
    "PageSizeDistribution",
    "StackedPageSizeDistribution",
    "ColumnTypeDistribution",
    "ColumnTypeStatKind",
    "ReportFormat",

    # Descriptors
    "ColumnType",
    "PageInfo",
    "ColumnRange",
    "ClusterDescriptor",
    "FieldDescriptor",
    "ColumnDescriptor",
    "ContainerDescriptor",
    "DescriptorProvider",
    "StaticDescriptorProvider",
    "FileDescriptorProvider",
    "descriptor_from_dict",
    "element_size",
    "type_name",
    "compression_settings_to_string",
    "FIELD_ZERO_ID",
    "UNKNOWN_COMPRESSION_SETTINGS",

    # Exceptions
    "InspectorError",
    "DescriptorValidationError",
    "NotFoundError",
    "InvalidArgumentError",
    "PreconditionError",
]

# Main inspector
from .module import Inspector, InspectorConfig

# Statistics
from .module import (
    ColumnStats,
    FieldStats,
    ColumnCollection,
    ColumnTypeTotals,
    collect_column_stats,
    aggregate_field_tree,
    index_field_tree,
)

# Distributions and reports
from .module import (
    PageSizeDistribution,
    StackedPageSizeDistribution,
    ColumnTypeDistribution,
    ColumnTypeStatKind,
    ReportFormat,
)

# Descriptors
from .descriptor import (
    ColumnType,
    PageInfo,
    ColumnRange,
    ClusterDescriptor,
    FieldDescriptor,
    ColumnDescriptor,
    ContainerDescriptor,
    DescriptorProvider,
    StaticDescriptorProvider,
    FileDescriptorProvider,
    descriptor_from_dict,
    element_size,
    type_name,
    compression_settings_to_string,
    FIELD_ZERO_ID,
    UNKNOWN_COMPRESSION_SETTINGS,
)

# Exceptions
from .exceptions import (
    InspectorError,
    DescriptorValidationError,
    NotFoundError,
    InvalidArgumentError,
    PreconditionError,
)
