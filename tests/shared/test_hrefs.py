import pytest

from vcd_shared.hrefs import classify_id, make_href, scoped_local_id


def test_make_href_joins_host_api_root_and_path():
    assert make_href("vcd.example.com", "vApp/vapp-1") == "https://vcd.example.com/api/vApp/vapp-1"
    assert make_href("vcd:8443", "/admin/network/n1", scheme="http", path="api/") == "http://vcd:8443/api/admin/network/n1"


def test_make_href_with_empty_path_root():
    assert make_href("vcd", "vApp/x", path="") == "https://vcd/vApp/x"


@pytest.mark.parametrize(
    "object_id, expected",
    [
        ("vapp-12345678-1234-1234-1234-12345678aaaa", "vapp"),
        ("vm-12345678-1234-1234-1234-1234567801aa", "vm"),
        ("vdc-12345678", None),
        ("", None),
    ],
)
def test_classify_id(object_id, expected):
    assert classify_id(object_id) == expected


def test_scoped_local_id_is_last_dash_chunk():
    assert scoped_local_id("vapp-12345678-1234-1234-1234-12345678aaaa") == "12345678aaaa"
