import pytest

from vcd_client import MockVcloudDirectorClient
from vcd_client.mock_data import default_dataset, load_dataset


def test_default_dataset_children():
    dataset = default_dataset()

    assert len(dataset.vapps) == 2
    assert [len(dataset.child_vm_ids(vapp_id)) for vapp_id in dataset.vapps] == [1, 2]


def test_child_vm_ids_for_unknown_vapp_is_empty():
    assert default_dataset().child_vm_ids("vapp-unknown") == []


def test_load_dataset_from_yaml(fixtures_dir):
    dataset = load_dataset(fixtures_dir / "mock_data.yaml")

    vapp = dataset.vapps["vapp-aaaaaaaa-0000-0000-0000-000000000001"]
    vm = dataset.vms["vm-aaaaaaaa-0000-0000-0000-0000000000a1"]
    assert vapp.status == "4"
    assert vapp.deployed == "true"
    assert vm.deployed == "true"
    assert vm.memory_in_mb == 8192
    assert dataset.networks["aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"] == {"name": "fixture-net"}


def test_mock_client_serves_yaml_dataset(fixtures_dir):
    client = MockVcloudDirectorClient.from_settings({"mock_data": str(fixtures_dir / "mock_data.yaml")})

    body = client.get_vapp("vapp-aaaaaaaa-0000-0000-0000-000000000001").body
    empty = client.get_vapp("vapp-aaaaaaaa-0000-0000-0000-000000000002").body

    assert [vm["name"] for vm in body["Children"]["Vm"]] == ["fixture-vm"]
    # network name resolved through the dataset network table
    assert body["NetworkConfigSection"]["NetworkConfig"]["networkName"] == "fixture-net"
    assert empty["Children"] == {"Vm": []}


def test_load_dataset_rejects_unknown_fields(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("vms:\n  vm-1:\n    name: a\n    parent_vapp: vapp-1\n    colour: blue\n", encoding="utf-8")

    with pytest.raises(ValueError, match="colour"):
        load_dataset(path)


def test_load_dataset_rejects_incomplete_records(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("vms:\n  vm-1:\n    name: a\n", encoding="utf-8")

    with pytest.raises(ValueError, match="vm-1"):
        load_dataset(path)


def test_load_dataset_requires_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_dataset(path)


def test_unquoted_timestamps_stay_strings(tmp_path):
    path = tmp_path / "dates.yaml"
    path.write_text(
        "vapps:\n"
        "  vapp-1:\n"
        "    name: a\n"
        "    date_created: 2014-03-16T10:52:31.874Z\n"
        "vms:\n"
        "  vm-1:\n"
        "    name: b\n"
        "    parent_vapp: vapp-1\n"
        "    date_created: 2015-06-01\n",
        encoding="utf-8",
    )

    dataset = load_dataset(path)
    body = MockVcloudDirectorClient(dataset=dataset).get_vapp("vapp-1").body

    assert body["DateCreated"] == "2014-03-16T10:52:31.874Z"
    assert body["Children"]["Vm"][0]["DateCreated"] == "2015-06-01"


@pytest.mark.parametrize(
    "record, message",
    [
        ("vapps:\n  vapp-1:\n    name: a\n    networks:\n      - name: net\n", "networks\\[0\\] is missing parent_id"),
        (
            "vms:\n  vm-1:\n    name: a\n    parent_vapp: vapp-1\n    nics:\n      - mac_address: x\n",
            "nics\\[0\\] is missing network_name",
        ),
        (
            "vms:\n  vm-1:\n    name: a\n    parent_vapp: vapp-1\n    disks:\n      - {}\n",
            "disks\\[0\\] is missing capacity",
        ),
        ("vms:\n  vm-1:\n    name: a\n    parent_vapp: vapp-1\n    disks: 10240\n", "disks must be a list"),
    ],
)
def test_load_dataset_rejects_malformed_entries(tmp_path, record, message):
    path = tmp_path / "bad.yaml"
    path.write_text(record, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        load_dataset(path)
