"""Records and preloaded datasets served by the mock vCloud Director client."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .logging_config import log

DEFAULT_DATE_CREATED = "2014-03-16T10:52:31.874Z"

VDC1_UUID = "12345678-1234-1234-1234-123456789abc"
DEFAULT_NETWORK_UUID = "12345678-1234-1234-1234-123456789def"

VAPP1_ID = "vapp-12345678-1234-1234-1234-12345678aaaa"
VAPP2_ID = "vapp-12345678-1234-1234-1234-12345678bbbb"
VAPP1_VM1_ID = "vm-12345678-1234-1234-1234-1234567801aa"
VAPP2_VM1_ID = "vm-12345678-1234-1234-1234-1234567801bb"
VAPP2_VM2_ID = "vm-12345678-1234-1234-1234-1234567802bb"


@dataclass
class MockVapp:
    """vApp record keyed by its ``vapp-`` identifier."""

    name: str
    status: str = "8"
    deployed: str = "true"
    date_created: str = DEFAULT_DATE_CREATED
    networks: List[Dict[str, str]] = field(default_factory=list)
    vdc_id: str = VDC1_UUID
    description: str = ""


@dataclass
class MockVm:
    """VM record keyed by its ``vm-`` identifier."""

    name: str
    parent_vapp: str
    status: str = "8"
    deployed: str = "false"
    needs_customization: str = "false"
    guest_os_type: str = "ubuntu64Guest"
    guest_os_description: str = "Ubuntu Linux (64-bit)"
    date_created: str = DEFAULT_DATE_CREATED
    cpu_count: int = 1
    memory_in_mb: int = 1024
    disks: List[Dict[str, Any]] = field(default_factory=lambda: [{"capacity": 10240}])
    nics: List[Dict[str, str]] = field(default_factory=list)
    computer_name: str | None = None
    customization_script: str = ""


@dataclass
class MockDataset:
    """Read-only lookup tables for the mock backend."""

    vapps: Dict[str, MockVapp] = field(default_factory=dict)
    vms: Dict[str, MockVm] = field(default_factory=dict)
    networks: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def child_vm_ids(self, vapp_id: str) -> List[str]:
        """Return the ids of VMs whose parent is ``vapp_id``, in dataset order."""
        return [vm_id for vm_id, vm in self.vms.items() if vm.parent_vapp == vapp_id]


def default_dataset() -> MockDataset:
    """Return the built-in dataset: one vApp with one VM, one with two VMs."""
    default_network = {"parent_id": DEFAULT_NETWORK_UUID, "name": "mock-net-routed-1"}
    return MockDataset(
        networks={DEFAULT_NETWORK_UUID: {"name": "mock-net-routed-1"}},
        vapps={
            VAPP1_ID: MockVapp(
                name="mock-vapp-1",
                status="8",
                description="Mock vApp 1",
                networks=[dict(default_network)],
            ),
            VAPP2_ID: MockVapp(
                name="mock-vapp-2",
                status="4",
                description="Mock vApp 2",
                networks=[dict(default_network)],
            ),
        },
        vms={
            VAPP1_VM1_ID: MockVm(
                name="mock-vm-1-1",
                parent_vapp=VAPP1_ID,
                nics=[
                    {"network_name": "Default Network", "mac_address": "00:50:56:aa:bb:01", "ip_address": "192.168.1.33"},
                    {"network_name": "Default Network", "mac_address": "00:50:56:aa:bb:02", "ip_address": "192.168.1.34"},
                ],
            ),
            VAPP2_VM1_ID: MockVm(
                name="mock-vm-2-1",
                parent_vapp=VAPP2_ID,
                status="4",
                deployed="true",
                cpu_count=2,
                memory_in_mb=2048,
                nics=[
                    {"network_name": "Default Network", "mac_address": "00:50:56:aa:bb:03", "ip_address": "192.168.1.35"},
                ],
            ),
            VAPP2_VM2_ID: MockVm(
                name="mock-vm-2-2",
                parent_vapp=VAPP2_ID,
                status="4",
                deployed="true",
                guest_os_type="centos64Guest",
                guest_os_description="CentOS 4/5/6/7 (64-bit)",
                disks=[{"capacity": 10240}, {"capacity": 51200}],
                nics=[
                    {"network_name": "Default Network", "mac_address": "00:50:56:aa:bb:04", "ip_address": "192.168.1.36"},
                ],
            ),
        },
    )


def load_dataset(path: str | Path) -> MockDataset:
    """Load a dataset from a YAML fixture file.

    The file holds ``vapps``, ``vms`` and optionally ``networks`` mappings keyed
    by identifier; record fields match ``MockVapp``/``MockVm``.

    Args:
        path: YAML file location.

    Returns:
        MockDataset: Parsed dataset.

    Raises:
        ValueError: If the file is not a mapping or a record is malformed.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Mock data file {path} does not contain a mapping")

    dataset = MockDataset(
        vapps={key: _record(MockVapp, key, value) for key, value in (data.get("vapps") or {}).items()},
        vms={key: _record(MockVm, key, value) for key, value in (data.get("vms") or {}).items()},
        networks=dict(data.get("networks") or {}),
    )
    log.info("Loaded mock data from %s: %d vApps, %d VMs", path, len(dataset.vapps), len(dataset.vms))
    return dataset


def _record(cls, key: str, value: Any):
    """Instantiate a record dataclass from a YAML mapping.

    Raises:
        ValueError: On a non-mapping entry, unknown fields, missing fields or
            malformed ``networks``/``nics``/``disks`` entries.
    """
    if not isinstance(value, dict):
        raise ValueError(f"Record {key} must be a mapping")
    known = {f.name: f for f in fields(cls)}
    unknown = set(value) - set(known)
    if unknown:
        raise ValueError(f"Record {key} has unknown fields: {sorted(unknown)}")

    cleaned = {name: _scalar(known[name], item) for name, item in value.items()}
    for name, required in _ENTRY_KEYS.items():
        if name in cleaned:
            _check_entries(key, name, cleaned[name], required)
    try:
        return cls(**cleaned)
    except TypeError as exc:
        raise ValueError(f"Record {key} is incomplete: {exc}") from exc


# Field annotations are strings under postponed evaluation.
_STRING_TYPES = ("str", "str | None")

# Keys each list entry must carry, per list-valued record field.
_ENTRY_KEYS = {
    "networks": ("parent_id",),
    "nics": ("network_name",),
    "disks": ("capacity",),
}


def _scalar(record_field, item: Any) -> Any:
    """Turn YAML-typed scalars back into the strings the documents carry."""
    if isinstance(item, bool):
        return str(item).lower()
    if isinstance(item, datetime):
        return _iso_timestamp(item)
    if isinstance(item, date):
        return item.isoformat()
    if isinstance(item, (int, float)) and record_field.type in _STRING_TYPES:
        return str(item)
    return item


def _iso_timestamp(value: datetime) -> str:
    """Format as ``2014-03-16T10:52:31.874Z`` (UTC, milliseconds)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _check_entries(key: str, name: str, entries: Any, required: Tuple[str, ...]) -> None:
    if not isinstance(entries, list):
        raise ValueError(f"Record {key}: {name} must be a list")
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Record {key}: {name}[{index}] must be a mapping")
        missing = [req for req in required if req not in entry]
        if missing:
            raise ValueError(f"Record {key}: {name}[{index}] is missing {', '.join(missing)}")


_DATA: Dict[Tuple[str, str], MockDataset] = {}


def data_for(host: str, username: str | None) -> MockDataset:
    """Return the dataset shared by all mock clients of one endpoint and user."""
    key = (host, username or "")
    if key not in _DATA:
        _DATA[key] = default_dataset()
    return _DATA[key]


def reset_data() -> None:
    """Drop every shared dataset; the next lookup starts from the defaults."""
    _DATA.clear()
