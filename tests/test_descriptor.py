"""
Unit tests for container descriptors, providers and configuration
"""

import logging

import pytest
from pydantic import ValidationError

from columnar_inspector import (
    ColumnType,
    ContainerDescriptor,
    DescriptorProvider,
    DescriptorValidationError,
    FieldDescriptor,
    FileDescriptorProvider,
    Inspector,
    InspectorConfig,
    NotFoundError,
    PreconditionError,
    StaticDescriptorProvider,
    compression_settings_to_string,
    descriptor_from_dict,
    element_size,
    type_name,
)


class TestElementHelpers:
    """Test element type helpers"""

    def test_element_sizes(self):
        """Test in-memory sizes of common types"""
        assert element_size(ColumnType.INDEX32) == 8
        assert element_size(ColumnType.REAL16) == 4
        assert element_size(ColumnType.SPLIT_UINT16) == 2
        assert element_size("Bit") == 1

    def test_type_name(self):
        assert type_name(ColumnType.SPLIT_REAL64) == "SplitReal64"

    @pytest.mark.parametrize("settings,expected", [
        (505, "zstd (level 5)"),
        (101, "zlib (level 1)"),
        (207, "lzma (level 7)"),
        (0, "use global (level 0)"),
        (-1, "unknown"),
        (None, "unknown"),
        (912, "undefined (level 12)"),
    ])
    def test_compression_settings_to_string(self, settings, expected):
        """Test algorithm and level rendering"""
        assert compression_settings_to_string(settings) == expected


class TestContainerDescriptor:
    """Test descriptor validation and navigation"""

    def test_navigation(self, events_descriptor):
        """Test field and column iteration"""
        assert [f.field_id for f in events_descriptor.iter_fields()] == [1, 2, 6, 7]
        assert [f.field_id for f in events_descriptor.iter_fields(3)] == [4, 5]
        assert [c.logical_id for c in events_descriptor.iter_columns(1)] == [0]
        assert events_descriptor.n_fields == 8
        assert events_descriptor.n_physical_columns == 5
        assert events_descriptor.n_clusters == 2

    def test_alias_detection(self, events_descriptor):
        """Test aliases are columns whose logical and physical ids differ"""
        aliases = [c.logical_id for c in events_descriptor.iter_columns() if c.is_alias]
        assert aliases == [5]

    def test_breadth_first(self, events_descriptor):
        """Test breadth-first iteration from a sub-field"""
        order = [f.field_id for f in events_descriptor.iter_fields_breadth_first(2)]
        assert order == [2, 3, 4, 5]

    def test_find_field_id(self, events_descriptor):
        """Test plain and dotted name resolution"""
        assert events_descriptor.find_field_id("n_hits") == 6
        assert events_descriptor.find_field_id("jets._0.eta") == 5
        assert events_descriptor.find_field_id("_0", parent_id=2) == 3
        assert events_descriptor.find_field_id("eta") is None
        assert events_descriptor.qualified_field_name(5) == "jets._0.eta"

    def test_get_unknown_field(self, events_descriptor):
        with pytest.raises(NotFoundError):
            events_descriptor.get_field(99)

    def test_page_range(self, events_descriptor):
        """Test per-cluster column and page ranges"""
        cluster = next(events_descriptor.iter_clusters())

        assert cluster.contains_column(4)
        assert cluster.column_range(0).n_elements == 100
        assert [p.bytes_on_storage for p in cluster.page_range(0)] == [150, 100]

    def test_unknown_parent_rejected(self, events_data):
        """Test fields must hang off an existing parent"""
        events_data["fields"].append(
            {"field_id": 8, "parent_id": 42, "field_name": "orphan", "type_name": "int"}
        )
        with pytest.raises(DescriptorValidationError):
            descriptor_from_dict(events_data)

    def test_parent_cycle_rejected(self, events_data):
        """Test fields whose parent chain never reaches the root"""
        events_data["fields"] += [
            {"field_id": 8, "parent_id": 9, "field_name": "x", "type_name": "int"},
            {"field_id": 9, "parent_id": 8, "field_name": "y", "type_name": "int"},
        ]
        with pytest.raises(DescriptorValidationError, match="cycle"):
            descriptor_from_dict(events_data)

    def test_self_parent_rejected(self, events_data):
        events_data["fields"].append(
            {"field_id": 8, "parent_id": 8, "field_name": "me", "type_name": "int"}
        )
        with pytest.raises(DescriptorValidationError, match="cycle"):
            descriptor_from_dict(events_data)

    def test_missing_root_rejected(self):
        """Test a container needs the root field"""
        with pytest.raises(ValidationError):
            ContainerDescriptor(
                name="broken",
                fields=[FieldDescriptor(field_id=1, parent_id=0, field_name="x")],
            )

    def test_mismatched_range_key_rejected(self, events_data):
        """Test range keys must match the range's column id"""
        events_data["clusters"][0]["column_ranges"] = {
            "3": events_data["clusters"][0]["column_ranges"][0],
        }
        with pytest.raises(DescriptorValidationError):
            descriptor_from_dict(events_data)

    def test_descriptor_is_frozen(self, events_descriptor):
        with pytest.raises(ValidationError):
            events_descriptor.name = "renamed"


class TestProviders:
    """Test descriptor providers and source loading"""

    def test_static_provider(self, events_descriptor):
        """Test an in-memory provider"""
        provider = StaticDescriptorProvider(events_descriptor)
        inspector = Inspector.create(provider)

        assert isinstance(provider, DescriptorProvider)
        assert inspector.descriptor.name == "events"

    def test_static_provider_requires_descriptor(self):
        with pytest.raises(PreconditionError):
            StaticDescriptorProvider(None)

    def test_from_json_source(self, json_source):
        """Test a named container is picked from a multi-container document"""
        inspector = Inspector.from_source("pair", json_source)

        assert inspector.descriptor.name == "pair"
        assert inspector.compressed_size == 450

    def test_from_yaml_source(self, yaml_source, inspector):
        """Test a single-container YAML document gives the same statistics"""
        loaded = Inspector.from_source("events", yaml_source)

        assert loaded.compressed_size == inspector.compressed_size
        assert loaded.uncompressed_size == inspector.uncompressed_size
        assert loaded.get_field_stats("jets").compressed_size == 1640

    def test_unknown_container_name(self, json_source, yaml_source):
        """Test names not present in the document are not found"""
        with pytest.raises(NotFoundError):
            Inspector.from_source("missing", json_source)
        with pytest.raises(NotFoundError):
            Inspector.from_source("missing", yaml_source)

    def test_missing_file(self, tmp_path):
        """Test an unreadable source is a precondition failure"""
        with pytest.raises(PreconditionError):
            Inspector.from_source("events", tmp_path / "nope.json")

    def test_empty_identifiers(self, json_source):
        """Test empty name or path is rejected"""
        with pytest.raises(PreconditionError):
            Inspector.from_source("", json_source)
        with pytest.raises(PreconditionError):
            Inspector.from_source("events", "")

    def test_provider_must_be_attached(self, json_source):
        provider = FileDescriptorProvider("events", json_source)
        with pytest.raises(PreconditionError):
            provider.get_descriptor()

    def test_attach_logs_source(self, json_source, caplog):
        """Test attaching a file source is logged"""
        with caplog.at_level(logging.INFO, logger="columnar_inspector"):
            Inspector.from_source("events", json_source)

        assert "Attached container 'events'" in caplog.text
        assert "Collected 5 columns and 8 fields" in caplog.text


class TestInspectorConfig:
    """Test configuration validation"""

    def test_defaults(self):
        config = InspectorConfig()

        assert config.default_n_bins == 64
        assert config.log_level == "INFO"

    def test_invalid_bin_count(self):
        with pytest.raises(ValidationError):
            InspectorConfig(default_n_bins=0)

    def test_log_level_normalized(self):
        assert InspectorConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            InspectorConfig(log_level="chatty")

    def test_log_level_is_per_inspector(self, events_descriptor, two_column_data):
        """Test one inspector's log level leaves other inspectors alone"""
        quiet = Inspector.create(events_descriptor, InspectorConfig(log_level="ERROR"))
        verbose = Inspector.create(
            descriptor_from_dict(two_column_data), InspectorConfig(log_level="DEBUG")
        )

        assert quiet._logger.level == logging.ERROR
        assert verbose._logger.level == logging.DEBUG
        assert quiet._logger is not verbose._logger
        assert logging.getLogger("columnar_inspector.module").level == logging.NOTSET

    def test_configured_bins(self, events_descriptor):
        """Test the configured bin count drives distributions"""
        inspector = Inspector.create(events_descriptor, InspectorConfig(default_n_bins=8))

        assert inspector.get_page_size_distribution(0).n_bins == 8
