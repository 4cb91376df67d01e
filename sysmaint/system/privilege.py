import os
from typing import Callable


class PermissionDenied(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class PrivilegeGuard:
    def __init__(self, geteuid: Callable[[], int] = os.geteuid):
        self._geteuid = geteuid

    def check(self) -> None:
        if self._geteuid() != 0:
            raise PermissionDenied("This program must be run as root.")
