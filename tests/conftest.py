"""
Shared pytest fixtures for columnar_inspector tests
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest
import yaml

from columnar_inspector import (
    ContainerDescriptor,
    Inspector,
    descriptor_from_dict,
)


ZSTD_5 = 505


def column_range(col_id: int, pages: List[Tuple[int, int]], settings: int = ZSTD_5) -> Dict[str, Any]:
    """Column range dict from ``(n_elements, bytes_on_storage)`` page pairs"""
    return {
        "physical_column_id": col_id,
        "n_elements": sum(n for n, _ in pages),
        "compression_settings": settings,
        "pages": [{"n_elements": n, "bytes_on_storage": b} for n, b in pages],
    }


@pytest.fixture
def events_data() -> Dict[str, Any]:
    """
    Container with a nested collection field and one alias column.

    Field tree:
        0 <root>
        ├── 1 px          float               col 0 (SplitReal32)
        ├── 2 jets        std::vector<Jet>    col 1 (Index64)
        │   └── 3 _0      Jet
        │       ├── 4 pt  float               col 2 (SplitReal32)
        │       └── 5 eta float               col 3 (SplitReal32)
        ├── 6 n_hits      std::int32_t        col 4 (SplitInt32, first cluster only)
        └── 7 px_alias    float               alias of col 0
    """
    return {
        "name": "events",
        "fields": [
            {"field_id": 0},
            {"field_id": 1, "parent_id": 0, "field_name": "px", "type_name": "float"},
            {"field_id": 2, "parent_id": 0, "field_name": "jets", "type_name": "std::vector<Jet>"},
            {"field_id": 3, "parent_id": 2, "field_name": "_0", "type_name": "Jet"},
            {"field_id": 4, "parent_id": 3, "field_name": "pt", "type_name": "float"},
            {"field_id": 5, "parent_id": 3, "field_name": "eta", "type_name": "float"},
            {"field_id": 6, "parent_id": 0, "field_name": "n_hits", "type_name": "std::int32_t"},
            {"field_id": 7, "parent_id": 0, "field_name": "px_alias", "type_name": "float"},
        ],
        "columns": [
            {"logical_id": 0, "physical_id": 0, "field_id": 1, "type": "SplitReal32"},
            {"logical_id": 1, "physical_id": 1, "field_id": 2, "type": "Index64"},
            {"logical_id": 2, "physical_id": 2, "field_id": 4, "type": "SplitReal32"},
            {"logical_id": 3, "physical_id": 3, "field_id": 5, "type": "SplitReal32"},
            {"logical_id": 4, "physical_id": 4, "field_id": 6, "type": "SplitInt32"},
            {"logical_id": 5, "physical_id": 0, "field_id": 7, "type": "SplitReal32"},
        ],
        "clusters": [
            {
                "cluster_id": 0,
                "first_entry_index": 0,
                "n_entries": 100,
                "column_ranges": [
                    column_range(0, [(60, 150), (40, 100)]),
                    column_range(1, [(50, 120)]),
                    column_range(2, [(200, 500)]),
                    column_range(3, [(200, 450)]),
                    column_range(4, [(100, 90)]),
                ],
            },
            {
                "cluster_id": 1,
                "first_entry_index": 100,
                "n_entries": 80,
                "column_ranges": [
                    column_range(0, [(80, 210)]),
                    column_range(1, [(30, 70)]),
                    column_range(2, [(100, 260)]),
                    column_range(3, [(100, 240)]),
                ],
            },
        ],
    }


@pytest.fixture
def events_descriptor(events_data) -> ContainerDescriptor:
    return descriptor_from_dict(events_data)


@pytest.fixture
def inspector(events_descriptor) -> Inspector:
    return Inspector.create(events_descriptor)


@pytest.fixture
def two_column_data() -> Dict[str, Any]:
    """Two top-level Real64 fields with compressed pages {100, 150} and {200}"""
    return {
        "name": "pair",
        "fields": [
            {"field_id": 0},
            {"field_id": 1, "parent_id": 0, "field_name": "a", "type_name": "double"},
            {"field_id": 2, "parent_id": 0, "field_name": "b", "type_name": "double"},
        ],
        "columns": [
            {"logical_id": 0, "physical_id": 0, "field_id": 1, "type": "Real64"},
            {"logical_id": 1, "physical_id": 1, "field_id": 2, "type": "Real64"},
        ],
        "clusters": [
            {
                "cluster_id": 0,
                "n_entries": 20,
                "column_ranges": [
                    column_range(0, [(10, 100), (10, 150)]),
                    column_range(1, [(20, 200)]),
                ],
            },
        ],
    }


@pytest.fixture
def json_source(tmp_path, events_data, two_column_data) -> Path:
    """JSON document holding several named containers"""
    containers = {}
    for data in (events_data, two_column_data):
        body = copy.deepcopy(data)
        containers[body.pop("name")] = body

    path = tmp_path / "containers.json"
    path.write_text(json.dumps({"containers": containers}), encoding="utf-8")
    return path


@pytest.fixture
def yaml_source(tmp_path, events_data) -> Path:
    """YAML document holding a single container"""
    path = tmp_path / "events.meta.yaml"
    path.write_text(yaml.safe_dump(events_data), encoding="utf-8")
    return path


@pytest.fixture
def make_range():
    """Factory for column range dicts"""
    return column_range
