import logging
from collections.abc import Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..domain.permission_set import (
    DEFAULT_PERMISSIONS,
    PermissionMapping,
    PermissionSet,
    has_any_permission,
)
from ..errors import ValidationError
from ..schemas.permission import RolePermissionRecord

logger = logging.getLogger(__name__)


def mapping_from_records(
    records: Iterable[RolePermissionRecord | Mapping],
    module_codes: Iterable[str],
) -> PermissionMapping:
    """Build the keyed mapping for one role from flat store records.

    Every catalog module is seeded with DEFAULT_PERMISSIONS first. Records for
    modules outside the catalog are dropped.

    Args:
        records: Loaded rows, either parsed records or raw dicts
        module_codes: The active catalog, in display order

    Returns:
        PermissionMapping: One entry per catalog module

    Raises:
        ValidationError: If a raw row is malformed or a module appears twice
    """
    mapping: PermissionMapping = {code: DEFAULT_PERMISSIONS for code in module_codes}
    seen: set[str] = set()

    for raw in records:
        record = _parse_record(raw)
        if record.module_code in seen:
            raise ValidationError(
                f"Duplicate permission record for module '{record.module_code}'",
                details={"module_code": record.module_code},
            )
        seen.add(record.module_code)

        if record.module_code not in mapping:
            logger.warning(
                "permission_record_dropped module=%s reason=unknown_module",
                record.module_code,
            )
            continue
        mapping[record.module_code] = record.to_permission_set()

    return mapping


def mapping_to_records(
    mapping: Mapping[str, PermissionSet],
    module_codes: Iterable[str] | None = None,
    *,
    active_only: bool = False,
) -> list[RolePermissionRecord]:
    """Flatten a mapping back into store records.

    Catalog order first, then any remaining keys sorted. With ``active_only``
    modules without a single capability are left out, which is what the store
    persists.
    """
    ordered: list[str] = []
    if module_codes is not None:
        ordered = [code for code in module_codes if code in mapping]
    listed = set(ordered)
    ordered.extend(sorted(code for code in mapping if code not in listed))

    records = []
    for code in ordered:
        permission_set = mapping[code]
        if active_only and not has_any_permission(permission_set):
            continue
        records.append(RolePermissionRecord.from_permission_set(code, permission_set))
    return records


def _parse_record(raw: RolePermissionRecord | Mapping) -> RolePermissionRecord:
    if isinstance(raw, RolePermissionRecord):
        return raw
    try:
        return RolePermissionRecord.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError("Malformed permission record", details=str(exc)) from exc
