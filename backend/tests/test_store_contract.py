"""
Behavior every storage backend must share.

Each test runs once per backend: volatile, JSON file and SQLite.
"""
import pytest

from domain.errors import (
    AlreadyExistsError,
    InvalidKeyKindError,
    MalformedError,
    NotFoundError,
    UnknownKeyKindError,
    UnknownStorageTypeError,
)
from domain.models import Computer, KeyKind
from repositories import get_store


@pytest.fixture(params=["volatile", "json", "sqlite"])
def store(request, tmp_path):
    path = tmp_path / f"inventory.{request.param}"
    with get_store(request.param, str(path)) as s:
        yield s


def _computer(n: int, assignee: str = "") -> Computer:
    return Computer(
        mac=f"01:23:45:67:89:0{n}",
        name=f"C{n}",
        ip=f"172.1.0.{n}",
        assignee=assignee,
    )


def _names(computers):
    return sorted(c.name for c in computers)


def test_add_read_delete_scenario(store):
    c = Computer(mac="01:23:45:67:89:ab", name="C1", ip="172.1.0.1", assignee="", description="")

    store.add(c)
    assert store.read(KeyKind.NAME, "C1") == c
    assert store.read(KeyKind.MAC, "01:23:45:67:89:ab") == c

    store.delete(KeyKind.MAC, "01:23:45:67:89:ab")
    with pytest.raises(NotFoundError):
        store.read_all(KeyKind.ALL)


@pytest.mark.parametrize(
    "clash",
    [
        Computer(mac="01:23:45:67:89:01", name="other", ip="10.10.10.10"),
        Computer(mac="ff:ff:ff:ff:ff:ff", name="C1", ip="10.10.10.10"),
        Computer(mac="ff:ff:ff:ff:ff:ff", name="other", ip="172.1.0.1"),
    ],
    ids=["mac", "name", "ip"],
)
def test_add_rejects_any_shared_identifying_attribute(store, clash):
    store.add(_computer(1))

    with pytest.raises(AlreadyExistsError):
        store.add(clash)

    assert len(store.read_all(KeyKind.ALL)) == 1


@pytest.mark.parametrize(
    "bad",
    [
        Computer(mac="", name="C9", ip="10.0.0.9"),
        Computer(mac="aa", name="", ip="10.0.0.9"),
        Computer(mac="aa", name="C9", ip=""),
        Computer(mac="aa", name="C9", ip="10.0.0.9", assignee="AB"),
        Computer(mac="aa", name="C9", ip="10.0.0.9", assignee="ABCD"),
    ],
)
def test_add_rejects_malformed(store, bad):
    with pytest.raises(MalformedError):
        store.add(bad)
    with pytest.raises(NotFoundError):
        store.read_all(KeyKind.ALL)


def test_assign_then_unassign(store):
    store.add(_computer(1))
    store.add(_computer(2))

    store.assign(KeyKind.IP, "172.1.0.1", "ABC")
    assert store.read(KeyKind.NAME, "C1").assignee == "ABC"
    assert _names(store.read_all(KeyKind.ASSIGNEE, "ABC")) == ["C1"]
    assert _names(store.read_all(KeyKind.NOT_ASSIGNED)) == ["C2"]

    store.unassign(KeyKind.IP, "172.1.0.1")
    assert store.read(KeyKind.NAME, "C1").assignee == ""
    with pytest.raises(NotFoundError):
        store.read_all(KeyKind.ASSIGNEE, "ABC")
    assert _names(store.read_all(KeyKind.NOT_ASSIGNED, "ignored")) == ["C1", "C2"]


def test_assign_rejects_bad_code(store):
    store.add(_computer(1))

    with pytest.raises(MalformedError):
        store.assign(KeyKind.MAC, "01:23:45:67:89:01", "TOOLONG")
    assert store.read(KeyKind.NAME, "C1").assignee == ""


def test_missing_keys_raise_not_found(store):
    store.add(_computer(1))

    with pytest.raises(NotFoundError):
        store.read(KeyKind.MAC, "nope")
    with pytest.raises(NotFoundError):
        store.delete(KeyKind.NAME, "nope")
    with pytest.raises(NotFoundError):
        store.assign(KeyKind.IP, "nope", "ABC")
    with pytest.raises(NotFoundError):
        store.unassign(KeyKind.IP, "nope")
    with pytest.raises(NotFoundError):
        store.read_all(KeyKind.ASSIGNEE, "ZZZ")


def test_key_kind_restrictions(store):
    store.add(_computer(1, assignee="ABC"))

    for kind in (KeyKind.ASSIGNEE, KeyKind.NOT_ASSIGNED, KeyKind.ALL):
        with pytest.raises(InvalidKeyKindError):
            store.read(kind, "ABC")
        with pytest.raises(InvalidKeyKindError):
            store.delete(kind, "ABC")
        with pytest.raises(InvalidKeyKindError):
            store.assign(kind, "ABC", "DEF")

    for kind in (KeyKind.MAC, KeyKind.NAME, KeyKind.IP):
        with pytest.raises(InvalidKeyKindError):
            store.read_all(kind, "C1")

    with pytest.raises(UnknownKeyKindError):
        store.read_all("Serial", "x")


def test_delete_removes_exactly_one(store):
    for n in (1, 2, 3):
        store.add(_computer(n, assignee="ABC"))

    store.delete(KeyKind.NAME, "C2")

    assert _names(store.read_all(KeyKind.ALL)) == ["C1", "C3"]
    assert _names(store.read_all(KeyKind.ASSIGNEE, "ABC")) == ["C1", "C3"]


def test_description_round_trips(store):
    c = Computer(mac="aa", name="C7", ip="10.0.0.7", assignee="QRS", description="spare, 2nd floor")
    store.add(c)

    assert store.read(KeyKind.MAC, "aa") == c


def test_unknown_storage_type():
    with pytest.raises(UnknownStorageTypeError):
        get_store("postgres")
