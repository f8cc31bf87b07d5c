from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from api.listener import create_listener_app
from domain.errors import MalformedError, NotificationError, StoreCloseError
from domain.models import Computer, KeyKind
from repositories.volatile import VolatileComputerStore
from services.inventory import InventoryService
from services.notifications import NotificationSender


def _computer(n: int, assignee: str = "") -> Computer:
    return Computer(mac=f"mac{n}", name=f"C{n}", ip=f"10.0.0.{n}", assignee=assignee)


@pytest.fixture
def notifier():
    return MagicMock(spec=NotificationSender)


@pytest.fixture
def service(notifier):
    return InventoryService(VolatileComputerStore(), notifier)


def test_fourth_assigned_add_notifies_once(service, notifier):
    for n in (1, 2, 3):
        service.add(_computer(n, assignee="ABC"))
    notifier.send.assert_not_called()

    service.add(_computer(4, assignee="ABC"))

    notifier.send.assert_called_once()
    sent = notifier.send.call_args.args[0]
    assert sent.who == "ABC"
    assert sent.message == "ABC is now assigned 4 items"


def test_assign_counts_after_mutation(service, notifier):
    for n in range(1, 5):
        service.add(_computer(n))
    for n in (1, 2, 3):
        service.assign(KeyKind.NAME, f"C{n}", "XYZ")
    notifier.send.assert_not_called()

    service.assign(KeyKind.MAC, "mac4", "XYZ")

    assert notifier.send.call_args.args[0].message == "XYZ is now assigned 4 items"


def test_unassigned_and_deletes_never_notify(service, notifier):
    for n in range(1, 6):
        service.add(_computer(n))
    service.unassign(KeyKind.NAME, "C1")
    service.delete(KeyKind.NAME, "C2")

    notifier.send.assert_not_called()


def test_failed_mutation_skips_check(service, notifier):
    with pytest.raises(MalformedError):
        service.assign(KeyKind.NAME, "C1", "TOOLONG")
    notifier.send.assert_not_called()


def test_notification_failure_keeps_mutation(service, notifier):
    for n in (1, 2, 3):
        service.add(_computer(n, assignee="ABC"))
    notifier.send.side_effect = NotificationError("listener down")

    with pytest.raises(NotificationError):
        service.add(_computer(4, assignee="ABC"))

    assert service.read(KeyKind.NAME, "C4").assignee == "ABC"
    assert service.count_assigned("ABC") == 4


def test_lock_is_released_while_sending(service, notifier):
    def send(_notification):
        assert not service._lock.locked()

    notifier.send.side_effect = send
    for n in range(1, 5):
        service.add(_computer(n, assignee="ABC"))

    notifier.send.assert_called_once()


def test_without_notifier_nothing_is_sent():
    service = InventoryService(VolatileComputerStore())
    for n in range(1, 6):
        service.add(_computer(n, assignee="ABC"))

    assert service.check_assignee("ABC") == 5


def test_alert_reaches_listener():
    listener = create_listener_app()
    sender = NotificationSender(url="/api/notify", session=TestClient(listener))
    service = InventoryService(VolatileComputerStore(), sender)

    for n in range(1, 5):
        service.add(_computer(n, assignee="JDO"))

    assert listener.state.received == ["WARNING [JDO]: JDO is now assigned 4 items"]


def test_close_releases_store_and_notifier(notifier):
    store = MagicMock(spec=VolatileComputerStore)
    InventoryService(store, notifier).close()

    store.close.assert_called_once()
    notifier.close.assert_called_once()


def test_count_is_taken_under_the_mutation_lock(notifier, monkeypatch):
    store = VolatileComputerStore()
    service = InventoryService(store, notifier)
    real_read_all = store.read_all

    def read_all(key, value=""):
        assert service._lock.locked()
        return real_read_all(key, value)

    monkeypatch.setattr(store, "read_all", read_all)
    for n in range(1, 5):
        service.add(_computer(n, assignee="ABC"))
    service.assign(KeyKind.NAME, "C1", "ABC")

    assert notifier.send.call_count == 2


def test_later_mutation_does_not_change_sent_count(service, notifier):
    for n in (1, 2, 3):
        service.add(_computer(n, assignee="ABC"))

    def send(_notification):
        # another request lands before this alert goes out
        if notifier.send.call_count == 1:
            service.add(_computer(5, assignee="ABC"))

    notifier.send.side_effect = send
    service.add(_computer(4, assignee="ABC"))

    messages = [c.args[0].message for c in notifier.send.call_args_list]
    assert messages == ["ABC is now assigned 4 items", "ABC is now assigned 5 items"]


def test_notifier_closed_when_store_close_fails(notifier):
    store = MagicMock(spec=VolatileComputerStore)
    store.close.side_effect = StoreCloseError("busy")

    with pytest.raises(StoreCloseError):
        InventoryService(store, notifier).close()

    notifier.close.assert_called_once()
