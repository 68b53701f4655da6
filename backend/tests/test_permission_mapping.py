import logging

import pytest

from kalsohr.auth.module_catalog import module_codes_for
from kalsohr.domain.permission_set import (
    DEFAULT_PERMISSIONS,
    FULL_ACCESS_PERMISSIONS,
    PermissionSet,
)
from kalsohr.errors import ValidationError
from kalsohr.schemas.permission import RolePermissionRecord
from kalsohr.services.permission_mapping import mapping_from_records, mapping_to_records

ORG_CODES = module_codes_for("organization")


class TestMappingFromRecords:
    """Loading store records into a mapping."""

    def test_seeds_every_catalog_module(self):
        """Modules without a record start as defaults."""
        mapping = mapping_from_records([], ORG_CODES)

        assert list(mapping) == list(ORG_CODES)
        assert all(value == DEFAULT_PERMISSIONS for value in mapping.values())

    def test_overlays_loaded_records(self):
        """Loaded records replace the defaults."""
        records = [
            {"moduleCode": "employees", "canRead": True, "canWrite": True},
            RolePermissionRecord(module_code="payroll", can_export=True),
        ]

        mapping = mapping_from_records(records, ORG_CODES)

        assert mapping["employees"] == PermissionSet(can_read=True, can_write=True)
        assert mapping["payroll"] == PermissionSet(can_export=True)
        assert mapping["dashboard"] == DEFAULT_PERMISSIONS

    def test_store_metadata_ignored(self):
        """Rows from the store carry ids and foreign keys next to the flags."""
        records = [{"id": 7, "orgModuleId": 3, "moduleCode": "leave", "canApprove": True}]

        mapping = mapping_from_records(records, ORG_CODES)

        assert mapping["leave"] == PermissionSet(can_approve=True)

    def test_unknown_module_dropped_with_warning(self, caplog: pytest.LogCaptureFixture):
        """Records for modules outside the catalog are dropped and logged."""
        with caplog.at_level(logging.WARNING):
            mapping = mapping_from_records(
                [{"moduleCode": "organizations", "canRead": True}], ORG_CODES
            )

        assert "organizations" not in mapping
        assert "permission_record_dropped module=organizations" in caplog.text

    def test_duplicate_module_rejected(self):
        """Two records for one module are rejected."""
        records = [
            {"moduleCode": "employees", "canRead": True},
            {"moduleCode": "employees", "canWrite": True},
        ]

        with pytest.raises(ValidationError, match="Duplicate permission record"):
            mapping_from_records(records, ORG_CODES)

    def test_malformed_flag_rejected(self):
        """Non-boolean flags in a record are rejected."""
        with pytest.raises(ValidationError, match="Malformed permission record") as exc_info:
            mapping_from_records([{"moduleCode": "employees", "canRead": "true"}], ORG_CODES)

        assert exc_info.value.status_code == 400

    def test_missing_module_code_rejected(self):
        """A record without a module code is rejected."""
        with pytest.raises(ValidationError):
            mapping_from_records([{"canRead": True}], ORG_CODES)


class TestMappingToRecords:
    """Saving a mapping as store records."""

    def test_catalog_order_then_extra_keys_sorted(self):
        """Catalog modules come first, extras follow sorted."""
        mapping = {
            "zeta": DEFAULT_PERMISSIONS,
            "leave": DEFAULT_PERMISSIONS,
            "alpha": DEFAULT_PERMISSIONS,
            "employees": DEFAULT_PERMISSIONS,
        }

        records = mapping_to_records(mapping, ORG_CODES)

        assert [record.module_code for record in records] == ["employees", "leave", "alpha", "zeta"]

    def test_active_only_drops_empty_modules(self):
        """active_only keeps modules holding a capability."""
        mapping = {
            "employees": FULL_ACCESS_PERMISSIONS,
            "master_data": PermissionSet(can_read=True),
            "dashboard": DEFAULT_PERMISSIONS,
        }

        records = mapping_to_records(mapping, ORG_CODES, active_only=True)

        assert [record.module_code for record in records] == ["employees", "master_data"]

    def test_record_wire_shape(self):
        """Records serialize with camelCase keys."""
        records = mapping_to_records({"employees": PermissionSet(can_read=True)})

        assert records[0].model_dump(by_alias=True) == {
            "moduleCode": "employees",
            "canRead": True,
            "canWrite": False,
            "canUpdate": False,
            "canDelete": False,
            "canApprove": False,
            "canExport": False,
        }

    def test_load_then_save_preserves_flags(self):
        """Loading and saving keeps every flag."""
        loaded = [{"moduleCode": "attendance", "canRead": True, "canApprove": True}]

        records = mapping_to_records(
            mapping_from_records(loaded, ORG_CODES), ORG_CODES, active_only=True
        )

        assert [record.model_dump(by_alias=True) for record in records] == [
            {
                "moduleCode": "attendance",
                "canRead": True,
                "canWrite": False,
                "canUpdate": False,
                "canDelete": False,
                "canApprove": True,
                "canExport": False,
            }
        ]
