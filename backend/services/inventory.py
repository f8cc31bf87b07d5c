"""
Inventory service: the process-wide store plus the lock that serializes it.

One instance is built at application start and handed to request handlers.
Each store call is its own critical section. After add/assign the assignee's
count is taken inside the same critical section as the mutation, and the
listener is called once the lock is released, so a slow listener only holds
up the request that triggered it.
"""
import logging
import threading
from typing import List, Optional

from domain.errors import NotFoundError
from domain.models import Computer, KeyKind
from repositories.base import ComputerStore, KeyArg
from services.notifications import NotificationSender, build_notification, should_notify

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, store: ComputerStore, notifier: Optional[NotificationSender] = None):
        self.store = store
        self.notifier = notifier
        self._lock = threading.Lock()

    def read(self, key: KeyArg, value: str) -> Computer:
        with self._lock:
            return self.store.read(key, value)

    def read_all(self, key: KeyArg, value: str = "") -> List[Computer]:
        with self._lock:
            return self.store.read_all(key, value)

    def add(self, computer: Computer) -> None:
        """
        Add a computer, then alert if its assignee is now over the threshold.

        A failed alert raises NotificationError after the computer has been
        stored; the addition is not undone.
        """
        with self._lock:
            self.store.add(computer)
            if computer.assignee:
                count = self._count(computer.assignee)
        if computer.assignee:
            self._alert(computer.assignee, count)

    def delete(self, key: KeyArg, value: str) -> None:
        with self._lock:
            self.store.delete(key, value)

    def assign(self, key: KeyArg, value: str, assignee: str) -> None:
        with self._lock:
            self.store.assign(key, value, assignee)
            if assignee:
                count = self._count(assignee)
        if assignee:
            self._alert(assignee, count)

    def unassign(self, key: KeyArg, value: str) -> None:
        with self._lock:
            self.store.unassign(key, value)

    def count_assigned(self, assignee: str) -> int:
        with self._lock:
            return self._count(assignee)

    def check_assignee(self, assignee: str) -> int:
        """Count `assignee`'s computers and send an alert past the threshold."""
        count = self.count_assigned(assignee)
        self._alert(assignee, count)
        return count

    def _count(self, assignee: str) -> int:
        # caller holds self._lock
        try:
            return len(self.store.read_all(KeyKind.ASSIGNEE, assignee))
        except NotFoundError:
            return 0

    def _alert(self, assignee: str, count: int) -> None:
        logger.debug("Assignee %s now holds %d computers", assignee, count)
        if should_notify(count) and self.notifier is not None:
            self.notifier.send(build_notification(assignee, count))

    def close(self) -> None:
        try:
            with self._lock:
                self.store.close()
        finally:
            if self.notifier is not None:
                self.notifier.close()
