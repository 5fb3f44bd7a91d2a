"""Mock vCloud Director client serving synthesized documents for offline tests.

Bodies mirror the shape the real client produces from vCloud 5.1 XML: section
names keep their ``ovf:``/``rasd:`` prefixes and attributes use ``prefix_name``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from vcd_shared import constants as c
from vcd_shared.hrefs import classify_id, make_href, scoped_local_id

from .errors import Forbidden
from .logging_config import log
from .messages import VcloudResponse
from .mock_data import MockDataset, MockVapp, MockVm, data_for, load_dataset

MOCK_HOST = "vcloud-director.example.com"
MOCK_USERNAME = "mockuser@mockorg"
MOCK_OWNER_HREF_ID = "12345678-1234-1234-1234-12345678df2b"
MOCK_STORAGE_PROFILE_ID = "12345678-1234-1234-1234-1234500e49a8"


@dataclass
class MockVcloudDirectorClient:
    """In-memory stand-in for ``VcloudDirectorClient``."""

    host: str = MOCK_HOST
    username: str | None = MOCK_USERNAME
    api_version: str = c.DEFAULT_API_VERSION
    scheme: str = c.DEFAULT_SCHEME
    path: str = c.DEFAULT_PATH
    dataset: MockDataset | None = None

    def __post_init__(self):
        if self.dataset is None:
            self.dataset = data_for(self.host, self.username)

    @classmethod
    def from_settings(cls, settings: dict) -> "MockVcloudDirectorClient":
        """Build a mock client from ``config.client_settings`` output.

        A ``mock_data`` path loads a YAML fixture instead of the shared default data.
        """
        dataset = load_dataset(settings["mock_data"]) if settings.get("mock_data") else None
        return cls(
            host=settings.get("host") or MOCK_HOST,
            username=settings.get("username") or MOCK_USERNAME,
            api_version=str(settings.get("api_version", c.DEFAULT_API_VERSION)),
            scheme=settings.get("scheme", c.DEFAULT_SCHEME),
            path=settings.get("path", c.DEFAULT_PATH),
            dataset=dataset,
        )

    @property
    def data(self) -> MockDataset:
        return self.dataset

    def make_href(self, rel: str) -> str:
        return make_href(self.host, rel, scheme=self.scheme, path=self.path)

    def login(self) -> None:
        """Sessions are not modelled by the mock."""

    def logout(self) -> None:
        """Sessions are not modelled by the mock."""

    def close(self) -> None:
        """Nothing to release."""

    def __enter__(self) -> "MockVcloudDirectorClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_vapp(self, vapp_id: str) -> VcloudResponse:
        """Retrieve a vApp or VM from the preloaded dataset.

        Args:
            vapp_id: ``vapp-...`` or ``vm-...`` identifier.

        Returns:
            VcloudResponse: Status 200 with a ``Content-Type`` carrying the API version.

        Raises:
            Forbidden: For an unknown identifier or prefix, as the API does.
        """
        kind = classify_id(vapp_id)
        if kind == "vapp":
            body = self.get_mock_vapp_body(vapp_id)
        elif kind == "vm":
            body = self.get_mock_vm_body(vapp_id)
        else:
            raise Forbidden(c.DENIED_MESSAGE, status=403)

        log.debug("Mock get_vapp(%s) -> %s", vapp_id, body["type"])
        return VcloudResponse(
            status=200,
            headers={"Content-Type": f"{body['type']};version={self.api_version}"},
            body=body,
        )

    def get_mock_vapp_body(self, vapp_id: str) -> Dict[str, Any]:
        vapp = self.data.vapps.get(vapp_id)
        if vapp is None:
            raise Forbidden(c.DENIED_MESSAGE, status=403)

        return {
            "deployed": "true",
            "status": vapp.status,
            "name": vapp.name,
            "type": c.TYPE_VAPP,
            "href": self.make_href(f"vApp/{vapp_id}"),
            "Link": {"rel": "up", "type": c.TYPE_VDC, "href": self.make_href(f"vdc/{vapp.vdc_id}")},
            "Description": vapp.description,
            "LeaseSettingsSection": self.get_vapp_lease_settings_section_body(vapp_id),
            "ovf:StartupSection": self.get_vapp_ovf_startup_section_body(vapp_id, vapp),
            "ovf:NetworkSection": self.get_vapp_ovf_network_section_body(vapp_id, vapp),
            "NetworkConfigSection": self.get_vapp_network_config_section_body(vapp_id, vapp),
            "SnapshotSection": self.get_snapshot_section_body(vapp_id),
            "DateCreated": vapp.date_created,
            "Owner": self.get_owner_section_body(vapp_id),
            "InMaintenanceMode": "false",
            "Children": {
                "Vm": self.get_vapp_children_vms_body(vapp_id),
            },
        }

    def get_mock_vm_body(self, vm_id: str) -> Dict[str, Any]:
        vm = self.data.vms.get(vm_id)
        if vm is None:
            raise Forbidden(c.DENIED_MESSAGE, status=403)

        return {
            "name": vm.name,
            "href": self.make_href(f"vApp/{vm_id}"),
            "type": c.TYPE_VM,
            "status": vm.status,
            "deployed": vm.deployed,
            "needsCustomization": vm.needs_customization,
            "ovf:VirtualHardwareSection": self.get_vm_virtual_hardware_section_body(vm_id, vm),
            "ovf:OperatingSystemSection": self.get_vm_operating_system_section_body(vm_id, vm),
            "NetworkConnectionSection": self.get_vm_network_connection_section_body(vm_id, vm),
            "GuestCustomizationSection": self.get_vm_guest_customization_section_body(vm_id, vm),
            "RuntimeInfoSection": self.get_vm_runtime_info_section_body(vm_id, vm),
            "SnapshotSection": self.get_snapshot_section_body(vm_id),
            "DateCreated": vm.date_created,
            "VAppScopedLocalId": scoped_local_id(vm.parent_vapp),
            "ovfenv:Environment": self.get_vm_ovfenv_environment_section_body(vm_id, vm),
            "VmCapabilities": self.get_vm_capabilities_section_body(vm_id, vm),
            "StorageProfile": self.get_vm_storage_profile_section_body(vm_id, vm),
        }

    def get_vapp_children_vms_body(self, vapp_id: str) -> List[Dict[str, Any]]:
        return [self.get_mock_vm_body(vm_id) for vm_id in self.data.child_vm_ids(vapp_id)]

    # vApp sections

    def get_vapp_lease_settings_section_body(self, vapp_id: str) -> Dict[str, Any]:
        href = self.make_href(f"vApp/{vapp_id}/leaseSettingsSection/")
        return {
            "type": c.TYPE_LEASE_SETTINGS,
            "href": href,
            "ovf_required": "false",
            "ovf:Info": "Lease settings section",
            "Link": {"rel": "edit", "type": c.TYPE_LEASE_SETTINGS, "href": href},
            "DeploymentLeaseInSeconds": "0",
            "StorageLeaseInSeconds": "0",
        }

    def get_vapp_ovf_startup_section_body(self, vapp_id: str, vapp: MockVapp) -> Dict[str, Any]:
        return {
            "xmlns_ns12": c.VCLOUD_NS,
            "ns12_href": self.make_href(f"vApp/{vapp_id}"),
            "ns12_type": c.TYPE_STARTUP_SECTION,
            "ovf:Info": "VApp startup section",
            "ovf:Item": {
                "ovf_stopDelay": "0",
                "ovf_stopAction": "powerOff",
                "ovf_startDelay": "0",
                "ovf_startAction": "powerOn",
                "ovf_order": "0",
                "ovf_id": vapp.name,
            },
        }

    def get_vapp_ovf_network_section_body(self, vapp_id: str, vapp: MockVapp) -> Dict[str, Any]:
        return {
            "ovf:Info": "The list of logical networks",
            "ovf:Network": [
                {"ovf_name": self._network_name(net), "ovf:Description": ""} for net in vapp.networks
            ],
        }

    def get_vapp_network_config_section_body(self, vapp_id: str, vapp: MockVapp) -> Dict[str, Any]:
        section: Dict[str, Any] = {
            "type": c.TYPE_NETWORK_CONFIG,
            "href": self.make_href(f"vApp/{vapp_id}/networkConfigSection/"),
            "ovf_required": "false",
            "ovf:Info": "The configuration parameters for logical networks",
        }
        if not vapp.networks:
            return section

        parent = vapp.networks[0]
        parent_id = parent["parent_id"]
        network_name = self._network_name(parent)
        section["NetworkConfig"] = {
            "networkName": network_name,
            "Description": "",
            "Configuration": {
                "IpScopes": {
                    "IpScope": {
                        "IsInherited": "true",
                        "Gateway": "10.10.10.1",
                        "Netmask": "255.255.255.0",
                        "Dns1": "8.8.8.8",
                        "Dns2": "8.8.4.4",
                        "DnsSuffix": "testing.example.com",
                        "IsEnabled": "true",
                        "IpRanges": {
                            "IpRange": [
                                {"StartAddress": "10.10.10.20", "EndAddress": "10.10.10.49"},
                            ],
                        },
                    },
                },
                "ParentNetwork": {
                    "name": network_name,
                    "id": parent_id,
                    "href": self.make_href(f"admin/network/{parent_id}"),
                },
                "FenceMode": "bridged",
                "RetainNetInfoAcrossDeployments": "false",
            },
            "IsDeployed": "true",
        }
        return section

    def get_snapshot_section_body(self, object_id: str) -> Dict[str, Any]:
        return {
            "type": c.TYPE_SNAPSHOT_SECTION,
            "href": self.make_href(f"vApp/{object_id}/snapshotSection"),
            "ovf_required": "false",
            "ovf:Info": "Snapshot information section",
        }

    def get_owner_section_body(self, object_id: str) -> Dict[str, Any]:
        return {
            "type": c.TYPE_OWNER,
            "User": {
                "type": c.TYPE_ADMIN_USER,
                "name": (self.username or MOCK_USERNAME).split("@")[0],
                "href": self.make_href(f"admin/user/{MOCK_OWNER_HREF_ID}"),
            },
        }

    # VM sections

    def get_vm_ovfenv_environment_section_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        # Repeats data from the other sections on a real API; left empty here.
        return {}

    def get_vm_storage_profile_section_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "type": c.TYPE_STORAGE_PROFILE,
            "name": "Mock Storage Profile",
            "href": self.make_href(f"vdcStorageProfile/{MOCK_STORAGE_PROFILE_ID}"),
        }

    def get_vm_capabilities_section_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "type": c.TYPE_VM_CAPABILITIES,
            "href": self.make_href(f"vApp/{vm_id}/vmCapabilities/"),
            "MemoryHotAddEnabled": "false",
            "CpuHotAddEnabled": "false",
        }

    def get_vm_runtime_info_section_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "xmlns_ns12": c.VCLOUD_NS,
            "ns12_href": self.make_href(f"vApp/{vm_id}/runtimeInfoSection"),
            "ns12_type": c.TYPE_VIRTUAL_HARDWARE,
            "ovf:Info": "Specifies Runtime info",
            "VMWareTools": {"version": "9282"},
        }

    def get_vm_operating_system_section_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "xmlns_ns12": c.VCLOUD_NS,
            "ovf_id": "94",
            "ns12_href": self.make_href(f"vApp/{vm_id}/operatingSystemSection/"),
            "ns12_type": c.TYPE_OPERATING_SYSTEM,
            "vmw_osType": vm.guest_os_type,
            "ovf:Info": "Specifies the operating system installed",
            "ovf:Description": vm.guest_os_description,
        }

    def get_vm_network_connection_section_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        href = self.make_href(f"vApp/{vm_id}/networkConnectionSection/")
        return {
            "type": c.TYPE_NETWORK_CONNECTION,
            "href": href,
            "ovf_required": "false",
            "ovf:Info": "Specifies the available VM network connections",
            "PrimaryNetworkConnectionIndex": "0",
            "NetworkConnection": [
                {
                    "network": nic["network_name"],
                    "needsCustomization": "false",
                    "NetworkConnectionIndex": str(index),
                    "IpAddress": nic.get("ip_address", ""),
                    "IsConnected": "true",
                    "MACAddress": nic.get("mac_address", ""),
                    "IpAddressAllocationMode": "MANUAL",
                }
                for index, nic in enumerate(vm.nics)
            ],
            "Link": {"rel": "edit", "type": c.TYPE_NETWORK_CONNECTION, "href": href},
        }

    def get_vm_guest_customization_section_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        href = self.make_href(f"vApp/{vm_id}/guestCustomizationSection/")
        return {
            "type": c.TYPE_GUEST_CUSTOMIZATION,
            "href": href,
            "ovf_required": "false",
            "ovf:Info": "Specifies Guest OS Customization Settings",
            "Enabled": "true",
            "ChangeSid": "false",
            "VirtualMachineId": vm_id[len(c.PREFIX_VM):],
            "JoinDomainEnabled": "false",
            "UseOrgSettings": "false",
            "DomainName": "",
            "DomainUserName": "",
            "DomainUserPassword": "",
            "MachineObjectOU": "",
            "AdminPasswordEnabled": "true",
            "AdminPasswordAuto": "true",
            "AdminPassword": "",
            "ResetPasswordRequired": "false",
            "CustomizationScript": vm.customization_script,
            "ComputerName": vm.computer_name or vm.name,
            "Link": {"rel": "edit", "type": c.TYPE_GUEST_CUSTOMIZATION, "href": href},
        }

    def get_vm_virtual_hardware_section_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "xmlns_ns12": c.VCLOUD_NS,
            "ovf_transport": "",
            "ns12_href": self.make_href(f"vApp/{vm_id}/virtualHardwareSection/"),
            "ns12_type": c.TYPE_VIRTUAL_HARDWARE,
            "ovf:Info": "Virtual hardware requirements",
            "ovf:System": {
                "vssd:ElementName": "Virtual Hardware Family",
                "vssd:InstanceID": "0",
                "vssd:VirtualSystemIdentifier": vm.name,
                "vssd:VirtualSystemType": "vmx-08",
            },
            "ovf:Item": self.get_vm_ovf_item_list(vm_id, vm),
        }

    def get_vm_ovf_item_list(self, vm_id: str, vm: MockVm) -> List[Dict[str, Any]]:
        """Return the RASD items of a VM as one flat list, ``None`` parts dropped."""
        parts = [
            self.get_network_cards_rasd_items_list_body(vm_id, vm),
            self.get_disks_rasd_items_list_body(vm_id, vm),
            self.get_media_rasd_item_cdrom_body(vm_id, vm),
            self.get_media_rasd_item_floppy_body(vm_id, vm),
            self.get_cpu_rasd_item_body(vm_id, vm),
            self.get_memory_rasd_item_body(vm_id, vm),
        ]
        return _flatten(parts)

    # RASD items

    def get_network_cards_rasd_items_list_body(self, vm_id: str, vm: MockVm) -> List[Dict[str, Any]]:
        items = []
        for index, nic in enumerate(vm.nics):
            items.append(
                {
                    "rasd:Address": nic.get("mac_address", ""),
                    "rasd:AddressOnParent": str(index),
                    "rasd:AutomaticAllocation": "true",
                    "rasd:Connection": nic["network_name"],
                    "rasd:Description": "E1000 ethernet adapter",
                    "rasd:ElementName": f"Network adapter {index}",
                    # the first NIC takes id 1; further NICs follow the memory item
                    "rasd:InstanceID": "1" if index == 0 else str(5 + index),
                    "rasd:ResourceSubType": "E1000",
                    "rasd:ResourceType": "10",
                }
            )
        return items

    def get_disks_rasd_items_list_body(self, vm_id: str, vm: MockVm) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = [
            {
                "rasd:Address": "0",
                "rasd:Description": "SCSI Controller",
                "rasd:ElementName": "SCSI Controller 0",
                "rasd:InstanceID": "2",
                "rasd:ResourceSubType": "lsilogic",
                "rasd:ResourceType": "6",
            }
        ]
        for index, disk in enumerate(vm.disks):
            items.append(
                {
                    "rasd:AddressOnParent": str(index),
                    "rasd:Description": "Hard disk",
                    "rasd:ElementName": f"Hard disk {index + 1}",
                    "rasd:HostResource": {
                        "ns12_capacity": str(disk["capacity"]),
                        "ns12_busSubType": "lsilogic",
                        "ns12_busType": "6",
                    },
                    "rasd:InstanceID": str(2000 + index),
                    "rasd:Parent": "2",
                    "rasd:ResourceType": "17",
                }
            )
        items.append(
            {
                "rasd:Address": "0",
                "rasd:Description": "IDE Controller",
                "rasd:ElementName": "IDE Controller 0",
                "rasd:InstanceID": "3",
                "rasd:ResourceType": "5",
            }
        )
        return items

    def get_media_rasd_item_cdrom_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "rasd:AddressOnParent": "1",
            "rasd:AutomaticAllocation": "true",
            "rasd:Description": "CD/DVD Drive",
            "rasd:ElementName": "CD/DVD Drive 1",
            "rasd:HostResource": "",
            "rasd:InstanceID": "3000",
            "rasd:Parent": "3",
            "rasd:ResourceType": "15",
        }

    def get_media_rasd_item_floppy_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "rasd:AddressOnParent": "0",
            "rasd:AutomaticAllocation": "false",
            "rasd:Description": "Floppy Drive",
            "rasd:ElementName": "Floppy Drive 1",
            "rasd:HostResource": "",
            "rasd:InstanceID": "8000",
            "rasd:ResourceType": "14",
        }

    def get_cpu_rasd_item_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "ns12_href": self.make_href(f"vApp/{vm_id}/virtualHardwareSection/cpu"),
            "ns12_type": c.TYPE_RASD_ITEM,
            "rasd:AllocationUnits": "hertz * 10^6",
            "rasd:Description": "Number of Virtual CPUs",
            "rasd:ElementName": f"{vm.cpu_count} virtual CPU(s)",
            "rasd:InstanceID": "4",
            "rasd:Reservation": "0",
            "rasd:ResourceType": "3",
            "rasd:VirtualQuantity": str(vm.cpu_count),
            "rasd:Weight": "0",
        }

    def get_memory_rasd_item_body(self, vm_id: str, vm: MockVm) -> Dict[str, Any]:
        return {
            "ns12_href": self.make_href(f"vApp/{vm_id}/virtualHardwareSection/memory"),
            "ns12_type": c.TYPE_RASD_ITEM,
            "rasd:AllocationUnits": "byte * 2^20",
            "rasd:Description": "Memory Size",
            "rasd:ElementName": f"{vm.memory_in_mb} MB of memory",
            "rasd:InstanceID": "5",
            "rasd:Reservation": "0",
            "rasd:ResourceType": "4",
            "rasd:VirtualQuantity": str(vm.memory_in_mb),
            "rasd:Weight": "0",
        }

    def _network_name(self, network: Dict[str, str]) -> str:
        """Return a vApp network's name, falling back to the dataset network table."""
        if network.get("name"):
            return network["name"]
        parent = self.data.networks.get(network.get("parent_id", ""), {})
        return parent.get("name", "mock-net-routed-1")


def _flatten(parts: List[Any]) -> List[Dict[str, Any]]:
    """Flatten nested lists of items, dropping ``None`` entries."""
    flat: List[Dict[str, Any]] = []
    for part in parts:
        if part is None:
            continue
        if isinstance(part, list):
            flat.extend(_flatten(part))
        else:
            flat.append(part)
    return flat
