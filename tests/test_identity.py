import pytest

from mobility_core.errors import IdentityError, MobilityError
from mobility_core.identity import default_identity, endpoint_identity, field_identity, link_identity


def test_default_identity_reads_id():
    assert default_identity({"id": "n1"}) == "n1"
    assert default_identity({"id": 0}) == 0


def test_default_identity_rejects_missing_and_none():
    with pytest.raises(IdentityError):
        default_identity({"name": "n1"})
    with pytest.raises(IdentityError) as info:
        default_identity({"id": None})
    assert info.value.record == {"id": None}


def test_identity_error_is_mobility_error():
    assert issubclass(IdentityError, MobilityError)


def test_field_identity():
    by_name = field_identity("name")
    assert by_name({"name": "alpha", "id": "x"}) == "alpha"
    with pytest.raises(IdentityError):
        by_name({"id": "x"})


def test_endpoint_identity_accepts_raw_or_node():
    assert endpoint_identity("a") == "a"
    assert endpoint_identity(7) == 7
    assert endpoint_identity({"id": "b", "x": 1.0}) == "b"
    assert endpoint_identity({"name": "c"}, field_identity("name")) == "c"


def test_link_identity():
    assert link_identity({"id": "l1"}) == "l1"
    with pytest.raises(IdentityError):
        link_identity({"source": "a", "target": "b"})
