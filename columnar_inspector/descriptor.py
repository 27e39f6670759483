"""
Columnar Inspector - Container Descriptors
columnar_inspector/descriptor.py

Metadata-only view of a columnar storage container: the field tree, the
columns backing each field and the per-cluster page layout. Nothing here
touches page payloads.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, model_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import (
    DescriptorValidationError,
    NotFoundError,
    PreconditionError,
)

logger = logging.getLogger(__name__)

FIELD_ZERO_ID = 0
UNKNOWN_COMPRESSION_SETTINGS = -1


# ============================================================================
# Column Element Types
# ============================================================================

class ColumnType(str, Enum):
    """On-storage column element types, in canonical order"""
    INDEX64 = "Index64"
    INDEX32 = "Index32"
    SWITCH = "Switch"
    BYTE = "Byte"
    CHAR = "Char"
    BIT = "Bit"
    REAL64 = "Real64"
    REAL32 = "Real32"
    REAL16 = "Real16"
    INT64 = "Int64"
    UINT64 = "UInt64"
    INT32 = "Int32"
    UINT32 = "UInt32"
    INT16 = "Int16"
    UINT16 = "UInt16"
    INT8 = "Int8"
    UINT8 = "UInt8"
    SPLIT_INDEX64 = "SplitIndex64"
    SPLIT_INDEX32 = "SplitIndex32"
    SPLIT_REAL64 = "SplitReal64"
    SPLIT_REAL32 = "SplitReal32"
    SPLIT_INT64 = "SplitInt64"
    SPLIT_UINT64 = "SplitUInt64"
    SPLIT_INT32 = "SplitInt32"
    SPLIT_UINT32 = "SplitUInt32"
    SPLIT_INT16 = "SplitInt16"
    SPLIT_UINT16 = "SplitUInt16"


_TYPE_ORDER: Dict[ColumnType, int] = {t: i for i, t in enumerate(ColumnType)}

# Size in bytes of one element in its default in-memory representation.
# Index columns are widened to 64-bit cluster sizes; a switch element is an
# index plus a 32-bit tag, padded to 16 bytes.
_ELEMENT_SIZES: Dict[ColumnType, int] = {
    ColumnType.INDEX64: 8,
    ColumnType.INDEX32: 8,
    ColumnType.SWITCH: 16,
    ColumnType.BYTE: 1,
    ColumnType.CHAR: 1,
    ColumnType.BIT: 1,
    ColumnType.REAL64: 8,
    ColumnType.REAL32: 4,
    ColumnType.REAL16: 4,
    ColumnType.INT64: 8,
    ColumnType.UINT64: 8,
    ColumnType.INT32: 4,
    ColumnType.UINT32: 4,
    ColumnType.INT16: 2,
    ColumnType.UINT16: 2,
    ColumnType.INT8: 1,
    ColumnType.UINT8: 1,
    ColumnType.SPLIT_INDEX64: 8,
    ColumnType.SPLIT_INDEX32: 8,
    ColumnType.SPLIT_REAL64: 8,
    ColumnType.SPLIT_REAL32: 4,
    ColumnType.SPLIT_INT64: 8,
    ColumnType.SPLIT_UINT64: 8,
    ColumnType.SPLIT_INT32: 4,
    ColumnType.SPLIT_UINT32: 4,
    ColumnType.SPLIT_INT16: 2,
    ColumnType.SPLIT_UINT16: 2,
}


class CompressionAlgorithm(int, Enum):
    """Compression algorithms encoded in the hundreds of a setting"""
    USE_GLOBAL = 0
    ZLIB = 1
    LZMA = 2
    OLD = 3
    LZ4 = 4
    ZSTD = 5
    UNDEFINED = 6


_ALGORITHM_NAMES: Dict[CompressionAlgorithm, str] = {
    CompressionAlgorithm.USE_GLOBAL: "use global",
    CompressionAlgorithm.ZLIB: "zlib",
    CompressionAlgorithm.LZMA: "lzma",
    CompressionAlgorithm.OLD: "old",
    CompressionAlgorithm.LZ4: "lz4",
    CompressionAlgorithm.ZSTD: "zstd",
    CompressionAlgorithm.UNDEFINED: "undefined",
}


def element_size(column_type: ColumnType) -> int:
    """In-memory size in bytes of one element of the given type"""
    return _ELEMENT_SIZES[ColumnType(column_type)]


def type_name(column_type: ColumnType) -> str:
    return ColumnType(column_type).value


def type_order(column_type: ColumnType) -> int:
    return _TYPE_ORDER[ColumnType(column_type)]


def compression_settings_to_string(settings: Optional[int]) -> str:
    """Render a compression setting as ``"<algorithm> (level N)"``"""
    if settings is None or settings == UNKNOWN_COMPRESSION_SETTINGS:
        return "unknown"

    algorithm, level = divmod(settings, 100)
    try:
        name = _ALGORITHM_NAMES[CompressionAlgorithm(algorithm)]
    except ValueError:
        name = "undefined"
    return f"{name} (level {level})"


# ============================================================================
# Descriptor Models
# ============================================================================

class PageInfo(BaseModel):
    """One compressed page of a column within a cluster"""
    model_config = ConfigDict(frozen=True)

    n_elements: NonNegativeInt = Field(..., description="Elements stored in the page")
    bytes_on_storage: NonNegativeInt = Field(..., description="Compressed size in bytes")


class ColumnRange(BaseModel):
    """Contribution of one cluster to one physical column"""
    model_config = ConfigDict(frozen=True)

    physical_column_id: NonNegativeInt
    first_element_index: NonNegativeInt = 0
    n_elements: NonNegativeInt = 0
    compression_settings: int = Field(
        default=UNKNOWN_COMPRESSION_SETTINGS,
        ge=UNKNOWN_COMPRESSION_SETTINGS,
        description="algorithm * 100 + level, -1 if unknown"
    )
    pages: Tuple[PageInfo, ...] = Field(default_factory=tuple)


class ClusterDescriptor(BaseModel):
    """A horizontal partition of the container"""
    model_config = ConfigDict(frozen=True)

    cluster_id: NonNegativeInt
    first_entry_index: NonNegativeInt = 0
    n_entries: NonNegativeInt = 0
    column_ranges: Dict[int, ColumnRange] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_range_keys(self) -> "ClusterDescriptor":
        for col_id, col_range in self.column_ranges.items():
            if col_id != col_range.physical_column_id:
                raise ValueError(
                    f"cluster {self.cluster_id}: range keyed as column {col_id} "
                    f"describes column {col_range.physical_column_id}"
                )
        return self

    def contains_column(self, physical_column_id: int) -> bool:
        return physical_column_id in self.column_ranges

    def column_range(self, physical_column_id: int) -> ColumnRange:
        return self.column_ranges[physical_column_id]

    def page_range(self, physical_column_id: int) -> Tuple[PageInfo, ...]:
        return self.column_ranges[physical_column_id].pages


class FieldDescriptor(BaseModel):
    """A named, typed node of the schema tree"""
    model_config = ConfigDict(frozen=True)

    field_id: NonNegativeInt
    parent_id: Optional[NonNegativeInt] = None
    field_name: str = ""
    type_name: str = ""
    description: str = ""


class ColumnDescriptor(BaseModel):
    """A column backing a field; aliases point at another physical column"""
    model_config = ConfigDict(frozen=True)

    logical_id: NonNegativeInt
    physical_id: NonNegativeInt
    field_id: NonNegativeInt
    type: ColumnType
    index: NonNegativeInt = 0

    @property
    def is_alias(self) -> bool:
        return self.logical_id != self.physical_id


class ContainerDescriptor(BaseModel):
    """
    Immutable snapshot of one container's schema and physical layout.

    Fields are stored in a flat id-indexed arena; the tree is expressed
    only through ``parent_id``.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    fields: Tuple[FieldDescriptor, ...] = Field(
        default_factory=lambda: (FieldDescriptor(field_id=FIELD_ZERO_ID),)
    )
    columns: Tuple[ColumnDescriptor, ...] = Field(default_factory=tuple)
    clusters: Tuple[ClusterDescriptor, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _check_tree(self) -> "ContainerDescriptor":
        ids = [f.field_id for f in self.fields]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate field ids")
        if FIELD_ZERO_ID not in ids:
            raise ValueError("missing root field with id 0")

        known = set(ids)
        for fld in self.fields:
            if fld.field_id == FIELD_ZERO_ID:
                if fld.parent_id is not None:
                    raise ValueError("root field cannot have a parent")
            elif fld.parent_id is None or fld.parent_id not in known:
                raise ValueError(f"field {fld.field_id} has unknown parent {fld.parent_id}")

        # every parent chain must end at the root
        parents = {f.field_id: f.parent_id for f in self.fields}
        reaches_root = {FIELD_ZERO_ID}
        for field_id in ids:
            chain: Set[int] = set()
            current = field_id
            while current not in reaches_root:
                if current in chain:
                    raise ValueError(f"field {field_id} is part of a parent cycle")
                chain.add(current)
                current = parents[current]
            reaches_root.update(chain)

        logical_ids = [c.logical_id for c in self.columns]
        if len(set(logical_ids)) != len(logical_ids):
            raise ValueError("duplicate logical column ids")
        for col in self.columns:
            if col.field_id not in known:
                raise ValueError(f"column {col.logical_id} belongs to unknown field {col.field_id}")
        return self

    # ---- fields ----

    @property
    def field_zero_id(self) -> int:
        return FIELD_ZERO_ID

    @property
    def n_fields(self) -> int:
        return len(self.fields)

    def _field_index(self) -> Dict[int, FieldDescriptor]:
        return {f.field_id: f for f in self.fields}

    def get_field(self, field_id: int) -> FieldDescriptor:
        for fld in self.fields:
            if fld.field_id == field_id:
                return fld
        raise NotFoundError(f"No field with ID {field_id} present")

    def iter_fields(self, parent_id: Optional[int] = None) -> Iterator[FieldDescriptor]:
        """Direct children of ``parent_id`` (root if omitted), ordered by id"""
        if parent_id is None:
            parent_id = FIELD_ZERO_ID
        children = [f for f in self.fields if f.parent_id == parent_id]
        return iter(sorted(children, key=lambda f: f.field_id))

    def iter_fields_breadth_first(self, field_id: int = FIELD_ZERO_ID) -> Iterator[FieldDescriptor]:
        queue = deque([self.get_field(field_id)])
        while queue:
            fld = queue.popleft()
            yield fld
            queue.extend(self.iter_fields(fld.field_id))

    def find_field_id(self, field_name: str, parent_id: int = FIELD_ZERO_ID) -> Optional[int]:
        """
        Resolve a field name below ``parent_id``. Dotted names descend into
        sub-fields. Returns None if nothing matches.
        """
        current = parent_id
        for part in field_name.split("."):
            match = next((f for f in self.iter_fields(current) if f.field_name == part), None)
            if match is None:
                return None
            current = match.field_id
        return current

    def qualified_field_name(self, field_id: int) -> str:
        index = self._field_index()
        parts: List[str] = []
        fld = index.get(field_id)
        while fld is not None and fld.field_id != FIELD_ZERO_ID:
            parts.append(fld.field_name)
            fld = index.get(fld.parent_id)
        return ".".join(reversed(parts))

    # ---- columns ----

    @property
    def n_physical_columns(self) -> int:
        return len({c.physical_id for c in self.columns})

    def iter_columns(self, field_id: Optional[int] = None) -> Iterator[ColumnDescriptor]:
        """All columns, or the columns directly owned by ``field_id``"""
        cols = self.columns if field_id is None else [c for c in self.columns if c.field_id == field_id]
        return iter(sorted(cols, key=lambda c: (c.field_id, c.index, c.logical_id)))

    # ---- clusters ----

    @property
    def n_clusters(self) -> int:
        return len(self.clusters)

    def iter_clusters(self) -> Iterator[ClusterDescriptor]:
        return iter(sorted(self.clusters, key=lambda c: c.cluster_id))

    def clone(self) -> "ContainerDescriptor":
        return self.model_copy(deep=True)


# ============================================================================
# Descriptor Providers
# ============================================================================

class DescriptorProvider(ABC):
    """Source of a container descriptor snapshot"""

    @abstractmethod
    def attach(self) -> None:
        """Make the descriptor available"""
        pass

    @abstractmethod
    def get_descriptor(self) -> ContainerDescriptor:
        """Return the current descriptor"""
        pass


class StaticDescriptorProvider(DescriptorProvider):
    """Provider over a descriptor that is already in memory"""

    def __init__(self, descriptor: ContainerDescriptor):
        if descriptor is None:
            raise PreconditionError("provided descriptor is null")
        self._descriptor = descriptor

    def attach(self) -> None:
        pass

    def get_descriptor(self) -> ContainerDescriptor:
        return self._descriptor


class FileDescriptorProvider(DescriptorProvider):
    """
    Provider reading a named container from a JSON or YAML metadata document.

    The document holds either a single container (with a ``name`` key) or a
    ``containers`` mapping of name to container body.
    """

    def __init__(self, name: str, source: Union[str, Path]):
        if not name:
            raise PreconditionError("container name must not be empty")
        if not source:
            raise PreconditionError("source path must not be empty")
        self.name = name
        self.source = Path(source)
        self._descriptor: Optional[ContainerDescriptor] = None

    def attach(self) -> None:
        if self._descriptor is not None:
            return
        document = _read_document(self.source)
        self._descriptor = descriptor_from_dict(_select_container(document, self.name, self.source))
        logger.info(f"Attached container '{self.name}' from {self.source}")

    def get_descriptor(self) -> ContainerDescriptor:
        if self._descriptor is None:
            raise PreconditionError(f"provider for '{self.name}' is not attached")
        return self._descriptor


def _read_document(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PreconditionError(f"cannot read source {path}: {e}") from e

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            document = yaml.safe_load(text)
        else:
            document = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise DescriptorValidationError(f"cannot parse source {path}: {e}") from e

    if not isinstance(document, dict):
        raise DescriptorValidationError(f"source {path} does not hold a mapping")
    return document


def _select_container(document: Dict[str, Any], name: str, path: Path) -> Dict[str, Any]:
    if "containers" in document:
        containers = document["containers"] or {}
        if name not in containers:
            raise NotFoundError(f"no container '{name}' in {path}")
        return {"name": name, **containers[name]}

    if document.get("name") != name:
        raise NotFoundError(f"no container '{name}' in {path}")
    return document


def descriptor_from_dict(data: Dict[str, Any]) -> ContainerDescriptor:
    """
    Build a descriptor from plain data.

    Cluster ``column_ranges`` may be given as a list; they are keyed by
    ``physical_column_id``.
    """
    body = dict(data)
    clusters = []
    for cluster in body.get("clusters", []):
        cluster = dict(cluster)
        ranges = cluster.get("column_ranges", {})
        if isinstance(ranges, list):
            cluster["column_ranges"] = {r["physical_column_id"]: r for r in ranges}
        clusters.append(cluster)
    body["clusters"] = clusters

    try:
        return ContainerDescriptor.model_validate(body)
    except PydanticValidationError as e:
        raise DescriptorValidationError(f"invalid container descriptor: {e}") from e
