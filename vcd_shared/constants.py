"""Shared vCloud Director constants used by both the real and mock clients."""

DEFAULT_API_VERSION = "5.1"
DEFAULT_SCHEME = "https"
DEFAULT_PATH = "/api"

AUTH_HEADER = "x-vcloud-authorization"
ACCEPT_TEMPLATE = "application/*+xml;version={version}"

VCLOUD_NS = "http://www.vmware.com/vcloud/v1.5"

# Media types
TYPE_VAPP = "application/vnd.vmware.vcloud.vApp+xml"
TYPE_VM = "application/vnd.vmware.vcloud.vm+xml"
TYPE_VDC = "application/vnd.vmware.vcloud.vdc+xml"
TYPE_LEASE_SETTINGS = "application/vnd.vmware.vcloud.leaseSettingsSection+xml"
TYPE_STARTUP_SECTION = "application/vnd.vmware.vcloud.startupSection+xml"
TYPE_NETWORK_CONFIG = "application/vnd.vmware.vcloud.networkConfigSection+xml"
TYPE_NETWORK_CONNECTION = "application/vnd.vmware.vcloud.networkConnectionSection+xml"
TYPE_GUEST_CUSTOMIZATION = "application/vnd.vmware.vcloud.guestCustomizationSection+xml"
TYPE_SNAPSHOT_SECTION = "application/vnd.vmware.vcloud.snapshotSection+xml"
TYPE_OWNER = "application/vnd.vmware.vcloud.owner+xml"
TYPE_ADMIN_USER = "application/vnd.vmware.admin.user+xml"
TYPE_VIRTUAL_HARDWARE = "application/vnd.vmware.vcloud.virtualHardwareSection+xml"
TYPE_OPERATING_SYSTEM = "application/vnd.vmware.vcloud.operatingSystemSection+xml"
TYPE_VM_CAPABILITIES = "application/vnd.vmware.vcloud.vmCapabilitiesSection+xml"
TYPE_STORAGE_PROFILE = "application/vnd.vmware.vcloud.vdcStorageProfile+xml"
TYPE_RASD_ITEM = "application/vnd.vmware.vcloud.rasdItem+xml"

# Identifier prefixes
PREFIX_VAPP = "vapp-"
PREFIX_VM = "vm-"

DENIED_MESSAGE = "This operation is denied."
