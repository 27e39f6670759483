"""
Columnar Inspector Module
columnar_inspector/module.py

Size, compression and page-layout statistics for a columnar storage
container, computed from descriptor metadata only. Column statistics and
field-subtree totals are built once when the inspector is constructed; every
query afterwards is a read-only view over those maps.
"""

from __future__ import annotations

import csv
import logging
import re
import sys
from collections import deque
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import (
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Pattern,
    TextIO,
    Tuple,
    Union,
)

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from .descriptor import (
    FIELD_ZERO_ID,
    UNKNOWN_COMPRESSION_SETTINGS,
    ColumnDescriptor,
    ColumnType,
    ContainerDescriptor,
    DescriptorProvider,
    FieldDescriptor,
    FileDescriptorProvider,
    StaticDescriptorProvider,
    compression_settings_to_string,
    element_size,
    type_name,
    type_order,
)
from .exceptions import (
    DescriptorValidationError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionError,
)

logger = logging.getLogger(__name__)

FieldMatcher = Union[str, Pattern[str], Callable[[str], bool]]


class ReportFormat(str, Enum):
    """Output formats for the per-type column report"""
    TABLE = "table"
    CSV = "csv"


class ColumnTypeStatKind(str, Enum):
    """Quantity accumulated per column type"""
    COUNT = "count"
    N_ELEMENTS = "n_elements"
    COMPRESSED_SIZE = "compressed_size"
    UNCOMPRESSED_SIZE = "uncompressed_size"


_STAT_KIND_NAMES: Dict[ColumnTypeStatKind, Tuple[str, str]] = {
    ColumnTypeStatKind.COUNT: ("col_type_count_hist", "Column count by type"),
    ColumnTypeStatKind.N_ELEMENTS: ("col_type_elem_count_hist", "Number of elements by column type"),
    ColumnTypeStatKind.COMPRESSED_SIZE: ("col_type_comp_size_hist", "Compressed size by column type"),
    ColumnTypeStatKind.UNCOMPRESSED_SIZE: ("col_type_uncomp_size_hist", "Uncompressed size by column type"),
}


# ============================================================================
# Configuration
# ============================================================================

class InspectorConfig(BaseModel):
    """Configuration for the inspector"""
    model_config = ConfigDict(frozen=True)

    default_n_bins: PositiveInt = Field(
        default=64,
        description="Bin count for page size distributions"
    )
    report_format: ReportFormat = Field(
        default=ReportFormat.TABLE,
        description="Default format of the column type report"
    )
    log_level: str = Field(
        default="INFO",
        description="Level of the inspector logger"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


# ============================================================================
# Statistics Models
# ============================================================================

def _compression_factor(compressed: int, uncompressed: int) -> float:
    if compressed == 0:
        return 0.0
    return uncompressed / compressed


@dataclass(frozen=True)
class ColumnStats:
    """Physical statistics of one non-alias column"""
    descriptor: ColumnDescriptor
    element_size: int
    n_elements: int
    compressed_page_sizes: Tuple[int, ...]
    compressed_size: int
    uncompressed_size: int

    @property
    def physical_id(self) -> int:
        return self.descriptor.physical_id

    @property
    def type(self) -> ColumnType:
        return self.descriptor.type

    @property
    def n_pages(self) -> int:
        return len(self.compressed_page_sizes)

    @property
    def compression_factor(self) -> float:
        return _compression_factor(self.compressed_size, self.uncompressed_size)


@dataclass(frozen=True)
class FieldStats:
    """Aggregated sizes of a field and all of its sub-fields"""
    descriptor: FieldDescriptor
    compressed_size: int
    uncompressed_size: int

    @property
    def field_id(self) -> int:
        return self.descriptor.field_id

    @property
    def compression_factor(self) -> float:
        return _compression_factor(self.compressed_size, self.uncompressed_size)


@dataclass(frozen=True)
class ColumnCollection:
    """Output of the column collection pass"""
    columns: Dict[int, ColumnStats]
    compressed_size: int
    uncompressed_size: int
    compression_settings: Optional[int]


class PageSizeDistribution(BaseModel):
    """Binned distribution of compressed page sizes"""
    model_config = ConfigDict(frozen=True)

    name: str
    title: str
    x_label: str = "Page size (B)"
    y_label: str = "Number of pages"
    bin_edges: List[float]
    counts: List[int]

    @property
    def n_bins(self) -> int:
        return len(self.counts)

    @property
    def n_entries(self) -> int:
        return sum(self.counts)

    @property
    def low(self) -> float:
        return self.bin_edges[0]

    @property
    def high(self) -> float:
        return self.bin_edges[-1]


class StackedPageSizeDistribution(BaseModel):
    """Per-type page size distributions sharing one bin range"""
    model_config = ConfigDict(frozen=True)

    name: str
    title: str
    distributions: Dict[ColumnType, PageSizeDistribution] = Field(default_factory=dict)

    @property
    def column_types(self) -> List[ColumnType]:
        return list(self.distributions)

    def get(self, column_type: ColumnType) -> PageSizeDistribution:
        try:
            return self.distributions[ColumnType(column_type)]
        except (KeyError, ValueError):
            raise NotFoundError(f"No distribution for column type {column_type}")


class ColumnTypeDistribution(BaseModel):
    """One value per column type for a chosen statistic"""
    model_config = ConfigDict(frozen=True)

    name: str
    title: str
    kind: ColumnTypeStatKind
    labels: List[str]
    values: List[float]

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.labels, self.values))


# ============================================================================
# Column Statistics Collector
# ============================================================================

def collect_column_stats(descriptor: ContainerDescriptor) -> ColumnCollection:
    """
    Scan every cluster for every non-alias column and sum up element counts,
    compressed page sizes and in-memory sizes.

    Raises DescriptorValidationError if two column ranges carry different
    known compression settings.
    """
    columns: Dict[int, ColumnStats] = {}
    compression_settings: Optional[int] = None
    total_compressed = 0
    total_uncompressed = 0
    clusters = list(descriptor.iter_clusters())

    for col_desc in descriptor.iter_columns():
        if col_desc.is_alias:
            continue

        col_id = col_desc.physical_id
        elem_size = element_size(col_desc.type)
        n_elements = 0
        page_sizes: List[int] = []
        uncompressed = 0

        for cluster in clusters:
            if not cluster.contains_column(col_id):
                continue

            col_range = cluster.column_range(col_id)
            n_elements += col_range.n_elements

            settings = col_range.compression_settings
            if settings != UNKNOWN_COMPRESSION_SETTINGS:
                if compression_settings is None:
                    compression_settings = settings
                elif settings != compression_settings:
                    # all ranges share one setting
                    message = (
                        f"compression setting mismatch between column ranges "
                        f"({compression_settings} vs {settings})"
                    )
                    logger.error(message)
                    raise DescriptorValidationError(message)

            for page in cluster.page_range(col_id):
                page_sizes.append(page.bytes_on_storage)
                uncompressed += page.n_elements * elem_size

        compressed = sum(page_sizes)
        total_compressed += compressed
        total_uncompressed += uncompressed

        columns[col_id] = ColumnStats(
            descriptor=col_desc,
            element_size=elem_size,
            n_elements=n_elements,
            compressed_page_sizes=tuple(page_sizes),
            compressed_size=compressed,
            uncompressed_size=uncompressed,
        )
        logger.debug(
            f"Column {col_id} ({type_name(col_desc.type)}): {len(page_sizes)} pages, "
            f"{compressed} B compressed, {uncompressed} B in memory"
        )

    return ColumnCollection(
        columns=columns,
        compressed_size=total_compressed,
        uncompressed_size=total_uncompressed,
        compression_settings=compression_settings,
    )


# ============================================================================
# Field Tree Aggregator
# ============================================================================

def index_field_tree(
    descriptor: ContainerDescriptor,
) -> Tuple[Dict[int, List[int]], Dict[int, List[ColumnDescriptor]]]:
    """
    Parent to children and field to owned non-alias column maps, built in
    one pass. Children are ordered by field id.
    """
    children: Dict[int, List[int]] = {}
    for fld in sorted(descriptor.fields, key=lambda f: f.field_id):
        if fld.parent_id is not None:
            children.setdefault(fld.parent_id, []).append(fld.field_id)

    owned: Dict[int, List[ColumnDescriptor]] = {}
    for col in descriptor.iter_columns():
        if not col.is_alias:
            owned.setdefault(col.field_id, []).append(col)

    return children, owned


def aggregate_field_tree(
    descriptor: ContainerDescriptor,
    column_stats: Mapping[int, ColumnStats],
    root_id: int = FIELD_ZERO_ID,
) -> Dict[int, FieldStats]:
    """
    Post-order walk of the field tree below ``root_id``. Every field's totals
    are its own non-alias columns plus the totals of its children.
    """
    children, owned_columns = index_field_tree(descriptor)
    owned: Dict[int, List[ColumnStats]] = {
        field_id: [column_stats[c.physical_id] for c in cols]
        for field_id, cols in owned_columns.items()
    }

    fields = {f.field_id: f for f in descriptor.fields}
    results: Dict[int, FieldStats] = {}
    stack: List[Tuple[int, bool]] = [(root_id, False)]

    while stack:
        field_id, expanded = stack.pop()
        if not expanded:
            stack.append((field_id, True))
            stack.extend((child, False) for child in children.get(field_id, ()))
            continue

        compressed = sum(c.compressed_size for c in owned.get(field_id, ()))
        uncompressed = sum(c.uncompressed_size for c in owned.get(field_id, ()))
        for child in children.get(field_id, ()):
            compressed += results[child].compressed_size
            uncompressed += results[child].uncompressed_size

        results[field_id] = FieldStats(
            descriptor=fields[field_id],
            compressed_size=compressed,
            uncompressed_size=uncompressed,
        )

    return results


# ============================================================================
# Distribution Helpers
# ============================================================================

def page_size_bin_range(page_sizes: Iterable[int], n_bins: int) -> Tuple[float, float]:
    """
    Range ``[min, max + (max - min) / n_bins]`` so the largest page lands
    inside the last bin. Empty input gives the placeholder ``(0, 0)``.
    """
    sizes = list(page_sizes)
    if not sizes:
        return 0.0, 0.0

    low, high = float(min(sizes)), float(max(sizes))
    upper = high + (high - low) / n_bins
    if upper <= high:
        upper = high + 1.0
    return low, upper


def build_page_size_distribution(
    page_sizes: Iterable[int],
    n_bins: int,
    name: str,
    title: str,
    bin_range: Optional[Tuple[float, float]] = None,
) -> PageSizeDistribution:
    sizes = np.asarray(list(page_sizes), dtype=np.float64)
    if bin_range is None:
        bin_range = page_size_bin_range(sizes.tolist(), n_bins)

    low, high = bin_range
    if sizes.size == 0 or high <= low:
        edges = np.linspace(low, high, n_bins + 1)
        counts = np.zeros(n_bins, dtype=np.int64)
    else:
        counts, edges = np.histogram(sizes, bins=n_bins, range=(low, high))

    return PageSizeDistribution(
        name=name,
        title=title,
        bin_edges=[float(e) for e in edges],
        counts=[int(c) for c in counts],
    )


# ============================================================================
# Report Formatter
# ============================================================================

@dataclass
class ColumnTypeTotals:
    """Running totals of the columns of one type"""
    count: int = 0
    n_elements: int = 0
    compressed_size: int = 0
    uncompressed_size: int = 0

    def add(self, stats: ColumnStats) -> None:
        self.count += 1
        self.n_elements += stats.n_elements
        self.compressed_size += stats.compressed_size
        self.uncompressed_size += stats.uncompressed_size


def group_by_type(column_stats: Iterable[ColumnStats]) -> Dict[ColumnType, ColumnTypeTotals]:
    """Totals per column type, ordered by type"""
    totals: Dict[ColumnType, ColumnTypeTotals] = {}
    for stats in column_stats:
        totals.setdefault(stats.type, ColumnTypeTotals()).add(stats)
    return {t: totals[t] for t in sorted(totals, key=type_order)}


_TABLE_HEADER = (
    " column type    | count   | # elements      | compressed bytes  | uncompressed bytes\n"
    "----------------|---------|-----------------|-------------------|--------------------\n"
)


def write_column_type_report(
    totals: Mapping[ColumnType, ColumnTypeTotals],
    fmt: Union[ReportFormat, str],
    output: TextIO,
) -> None:
    try:
        fmt = ReportFormat(fmt)
    except ValueError:
        raise InvalidArgumentError(f"Invalid print format: {fmt}")

    if fmt == ReportFormat.TABLE:
        output.write(_TABLE_HEADER)
        for col_type, info in totals.items():
            output.write(
                f"{type_name(col_type):>15} |{info.count:>8} |{info.n_elements:>16} |"
                f"{info.compressed_size:>18} |{info.uncompressed_size:>18} \n"
            )
    else:
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(["columnType", "count", "nElements", "compressedSize", "uncompressedSize"])
        for col_type, info in totals.items():
            writer.writerow([
                type_name(col_type),
                info.count,
                info.n_elements,
                info.compressed_size,
                info.uncompressed_size,
            ])


# ============================================================================
# Main Inspector
# ============================================================================

def _as_predicate(pattern: FieldMatcher) -> Callable[[str], bool]:
    if isinstance(pattern, str):
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise InvalidArgumentError(f"Invalid pattern '{pattern}': {e}")
        return lambda value: compiled.fullmatch(value) is not None
    if isinstance(pattern, re.Pattern):
        return lambda value: pattern.fullmatch(value) is not None
    if callable(pattern):
        return lambda value: bool(pattern(value))
    raise InvalidArgumentError(f"Unsupported field pattern: {pattern!r}")


def _as_column_type(column_type: Union[ColumnType, str]) -> ColumnType:
    try:
        return ColumnType(column_type)
    except ValueError:
        raise InvalidArgumentError(f"Unknown column type: {column_type}")


class Inspector:
    """
    Storage statistics for one columnar container.

    Construction attaches the descriptor provider, snapshots its descriptor,
    collects per-column statistics and aggregates them over the field tree.
    A failure at any of these steps leaves no inspector behind.
    """

    def __init__(
        self,
        provider: DescriptorProvider,
        config: Optional[InspectorConfig] = None,
    ):
        if not isinstance(provider, DescriptorProvider):
            raise PreconditionError("an attached descriptor provider is required")

        self.config = config or InspectorConfig()

        provider.attach()
        self._descriptor = provider.get_descriptor().clone()
        self._logger = logger.getChild(self._descriptor.name)
        self._logger.setLevel(self.config.log_level)
        self._logger.info(f"Inspecting container '{self._descriptor.name}'")

        self._children, self._owned_columns = index_field_tree(self._descriptor)
        collection = collect_column_stats(self._descriptor)
        self._compressed_size = collection.compressed_size
        self._uncompressed_size = collection.uncompressed_size
        self._compression_settings = collection.compression_settings
        self._column_stats: Mapping[int, ColumnStats] = MappingProxyType(collection.columns)
        self._field_stats: Mapping[int, FieldStats] = MappingProxyType(
            aggregate_field_tree(self._descriptor, self._column_stats)
        )

        self._logger.info(
            f"Collected {len(self._column_stats)} columns and {len(self._field_stats)} fields: "
            f"{self._compressed_size} B compressed, {self._uncompressed_size} B uncompressed"
        )

    @classmethod
    def create(
        cls,
        source: Union[ContainerDescriptor, DescriptorProvider],
        config: Optional[InspectorConfig] = None,
    ) -> "Inspector":
        """Build an inspector from a descriptor or a provider"""
        if source is None:
            raise PreconditionError("provided container is null")
        if isinstance(source, ContainerDescriptor):
            source = StaticDescriptorProvider(source)
        elif not isinstance(source, DescriptorProvider):
            raise PreconditionError(f"cannot inspect object of type {type(source).__name__}")
        return cls(source, config)

    @classmethod
    def from_source(
        cls,
        name: str,
        source: Union[str, Path],
        config: Optional[InspectorConfig] = None,
    ) -> "Inspector":
        """Build an inspector for container ``name`` stored in a metadata file"""
        return cls(FileDescriptorProvider(name, source), config)

    # ---- container-wide ----

    @property
    def descriptor(self) -> ContainerDescriptor:
        return self._descriptor

    @property
    def compressed_size(self) -> int:
        return self._compressed_size

    @property
    def uncompressed_size(self) -> int:
        return self._uncompressed_size

    @property
    def compression_settings(self) -> Optional[int]:
        return self._compression_settings

    @property
    def compression_settings_as_string(self) -> str:
        return compression_settings_to_string(self._compression_settings)

    @property
    def compression_factor(self) -> float:
        return _compression_factor(self._compressed_size, self._uncompressed_size)

    @property
    def column_stats(self) -> Mapping[int, ColumnStats]:
        return self._column_stats

    @property
    def field_stats(self) -> Mapping[int, FieldStats]:
        return self._field_stats

    # ---- columns ----

    def get_column_stats(self, physical_column_id: int) -> ColumnStats:
        if physical_column_id not in self._column_stats:
            raise NotFoundError(f"No column with physical ID {physical_column_id} present")
        return self._column_stats[physical_column_id]

    def get_column_count_by_type(self, column_type: Union[ColumnType, str]) -> int:
        return len(self.get_columns_by_type(column_type))

    def get_columns_by_type(self, column_type: Union[ColumnType, str]) -> List[int]:
        column_type = _as_column_type(column_type)
        return sorted(
            col_id for col_id, stats in self._column_stats.items()
            if stats.type == column_type
        )

    def get_column_types(self) -> List[ColumnType]:
        """Distinct column types present, in type order"""
        return sorted({stats.type for stats in self._column_stats.values()}, key=type_order)

    def get_columns_by_field_id(self, field_id: int) -> List[int]:
        """Physical ids of the non-alias columns in the subtree of ``field_id``"""
        if field_id not in self._field_stats:
            raise NotFoundError(f"No field with ID {field_id} present")

        col_ids: List[int] = []
        queue = deque([field_id])
        while queue:
            current = queue.popleft()
            col_ids.extend(c.physical_id for c in self._owned_columns.get(current, ()))
            queue.extend(self._children.get(current, ()))
        return col_ids

    # ---- fields ----

    def get_field_stats(self, field: Union[int, str]) -> FieldStats:
        """Field subtree statistics by field id or (dotted) field name"""
        if isinstance(field, str):
            field_id = self._descriptor.find_field_id(field)
            if field_id is None:
                raise NotFoundError(f"Could not find field `{field}`")
            field = field_id

        if field not in self._field_stats:
            raise NotFoundError(f"No field with ID {field} present")
        return self._field_stats[field]

    def _match_fields(
        self,
        pattern: FieldMatcher,
        attribute: Callable[[FieldDescriptor], str],
        include_subfields: bool,
    ) -> List[int]:
        matches = _as_predicate(pattern)
        field_ids = []
        for field_id in sorted(self._field_stats):
            desc = self._field_stats[field_id].descriptor
            if not include_subfields and desc.parent_id != FIELD_ZERO_ID:
                continue
            if matches(attribute(desc)):
                field_ids.append(field_id)
        return field_ids

    def get_fields_by_type(self, type_pattern: FieldMatcher, include_subfields: bool = True) -> List[int]:
        return self._match_fields(type_pattern, lambda d: d.type_name, include_subfields)

    def get_field_count_by_type(self, type_pattern: FieldMatcher, include_subfields: bool = True) -> int:
        return len(self.get_fields_by_type(type_pattern, include_subfields))

    def get_fields_by_name(self, name_pattern: FieldMatcher, include_subfields: bool = True) -> List[int]:
        return self._match_fields(name_pattern, lambda d: d.field_name, include_subfields)

    def get_field_count_by_name(self, name_pattern: FieldMatcher, include_subfields: bool = True) -> int:
        return len(self.get_fields_by_name(name_pattern, include_subfields))

    # ---- reports ----

    def print_column_type_info(
        self,
        fmt: Optional[Union[ReportFormat, str]] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        """Write per-type column totals as a table or CSV"""
        write_column_type_report(
            group_by_type(self._column_stats.values()),
            fmt if fmt is not None else self.config.report_format,
            output if output is not None else sys.stdout,
        )

    def get_column_type_info_distribution(
        self,
        kind: Union[ColumnTypeStatKind, str],
        name: str = "",
        title: str = "",
    ) -> ColumnTypeDistribution:
        try:
            kind = ColumnTypeStatKind(kind)
        except ValueError:
            raise InvalidArgumentError(f"Unknown distribution kind: {kind}")

        default_name, default_title = _STAT_KIND_NAMES[kind]
        totals = group_by_type(self._column_stats.values())
        values = {
            ColumnTypeStatKind.COUNT: lambda t: t.count,
            ColumnTypeStatKind.N_ELEMENTS: lambda t: t.n_elements,
            ColumnTypeStatKind.COMPRESSED_SIZE: lambda t: t.compressed_size,
            ColumnTypeStatKind.UNCOMPRESSED_SIZE: lambda t: t.uncompressed_size,
        }[kind]

        return ColumnTypeDistribution(
            name=name or default_name,
            title=title or default_title,
            kind=kind,
            labels=[type_name(t) for t in totals],
            values=[float(values(info)) for info in totals.values()],
        )

    # ---- page size distributions ----

    def _n_bins(self, n_bins: Optional[int]) -> int:
        if n_bins is None:
            return self.config.default_n_bins
        if n_bins < 1:
            raise InvalidArgumentError(f"Bin count must be positive, got {n_bins}")
        return n_bins

    def _page_sizes(self, column_ids: Iterable[int]) -> List[int]:
        sizes: List[int] = []
        for col_id in column_ids:
            sizes.extend(self.get_column_stats(col_id).compressed_page_sizes)
        return sizes

    def get_page_size_distribution(
        self,
        physical_column_id: int,
        name: str = "",
        title: str = "",
        n_bins: Optional[int] = None,
    ) -> PageSizeDistribution:
        title = title or f"Page size distribution for column with ID {physical_column_id}"
        return self.get_page_size_distribution_for_columns([physical_column_id], name, title, n_bins)

    def get_page_size_distribution_for_columns(
        self,
        column_ids: Iterable[int],
        name: str = "",
        title: str = "",
        n_bins: Optional[int] = None,
    ) -> PageSizeDistribution:
        return build_page_size_distribution(
            self._page_sizes(column_ids),
            self._n_bins(n_bins),
            name or "page_size_hist",
            title or "Page size distribution",
        )

    def get_page_size_distribution_for_type(
        self,
        column_type: Union[ColumnType, str],
        name: str = "",
        title: str = "",
        n_bins: Optional[int] = None,
    ) -> PageSizeDistribution:
        column_type = _as_column_type(column_type)
        name = name or f"page_size_hist_{type_name(column_type)}"
        title = title or f"Page size distribution for columns with type {type_name(column_type)}"
        return build_page_size_distribution(
            self._page_sizes(self.get_columns_by_type(column_type)),
            self._n_bins(n_bins),
            name,
            title,
        )

    def get_page_size_distribution_for_types(
        self,
        column_types: Iterable[Union[ColumnType, str]] = (),
        name: str = "",
        title: str = "",
        n_bins: Optional[int] = None,
    ) -> StackedPageSizeDistribution:
        """
        One distribution per column type over a shared bin range, so the
        results can be stacked. No types means every type present; types
        without columns are left out.
        """
        n_bins = self._n_bins(n_bins)
        name = name or "page_size_hist"
        title = title or "Per-column type page size distribution"

        types = [_as_column_type(t) for t in column_types] or self.get_column_types()
        sizes_by_type: Dict[ColumnType, List[int]] = {}
        for col_type in sorted(set(types), key=type_order):
            col_ids = self.get_columns_by_type(col_type)
            if col_ids:
                sizes_by_type[col_type] = self._page_sizes(col_ids)

        all_sizes = [size for sizes in sizes_by_type.values() for size in sizes]
        bin_range = page_size_bin_range(all_sizes, n_bins)

        return StackedPageSizeDistribution(
            name=name,
            title=title,
            distributions={
                col_type: build_page_size_distribution(
                    sizes,
                    n_bins,
                    f"{name}_{type_name(col_type)}",
                    type_name(col_type),
                    bin_range=bin_range,
                )
                for col_type, sizes in sizes_by_type.items()
            },
        )
