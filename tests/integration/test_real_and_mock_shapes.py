"""The mock backend and the real client must hand callers the same document shape."""

import httpx

from vcd_client import MockVcloudDirectorClient, VcloudDirectorClient
from vcd_client.mock_data import VAPP1_ID

FIXTURE_PATH = "/api/vApp/vapp-11111111-2222-3333-4444-555555555555"


def _real_body(fixtures_dir):
    content = (fixtures_dir / "vapp_single_vm.xml").read_bytes()

    def handler(request):
        if request.url.path == "/api/sessions":
            return httpx.Response(200, headers={"x-vcloud-authorization": "tok"})
        assert request.url.path == FIXTURE_PATH
        return httpx.Response(
            200,
            headers={"Content-Type": "application/vnd.vmware.vcloud.vApp+xml;version=5.1"},
            content=content,
        )

    client = VcloudDirectorClient("vcloud.example.com", "admin@org", "pw", transport=httpx.MockTransport(handler))
    return client.get_vapp(FIXTURE_PATH.rsplit("/", 1)[-1]).body


def test_vapp_top_level_keys_match(fixtures_dir):
    real = _real_body(fixtures_dir)
    mock = MockVcloudDirectorClient().get_vapp(VAPP1_ID).body

    assert set(mock) <= set(real)
    assert isinstance(real["Children"]["Vm"], list)
    assert isinstance(mock["Children"]["Vm"], list)


def test_vm_keys_match(fixtures_dir):
    real_vm = _real_body(fixtures_dir)["Children"]["Vm"][0]
    mock_vm = MockVcloudDirectorClient().get_vapp(VAPP1_ID).body["Children"]["Vm"][0]

    assert set(mock_vm) <= set(real_vm)


def test_section_attribute_naming_matches(fixtures_dir):
    real = _real_body(fixtures_dir)
    mock = MockVcloudDirectorClient().get_vapp(VAPP1_ID).body

    startup_keys = {"xmlns_ns12", "ns12_href", "ns12_type", "ovf:Info", "ovf:Item"}
    assert startup_keys <= set(real["ovf:StartupSection"])
    assert startup_keys <= set(mock["ovf:StartupSection"])
    assert set(mock["ovf:StartupSection"]["ovf:Item"]) == set(real["ovf:StartupSection"]["ovf:Item"])
    assert real["LeaseSettingsSection"]["ovf_required"] == mock["LeaseSettingsSection"]["ovf_required"]

    real_os = real["Children"]["Vm"][0]["ovf:OperatingSystemSection"]
    mock_os = mock["Children"]["Vm"][0]["ovf:OperatingSystemSection"]
    assert set(mock_os) == set(real_os)
