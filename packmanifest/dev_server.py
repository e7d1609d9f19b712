from __future__ import annotations

import logging
import socket

from .settings import PackSettings


logger = logging.getLogger("packmanifest.dev_server")


class DevServer:
    """Reports whether a live dev server is already serving packs."""

    def __init__(self, config: PackSettings) -> None:
        self.config = config

    @property
    def host(self) -> str:
        return self.config.dev_server_host

    @property
    def port(self) -> int:
        return int(self.config.dev_server_port)

    @property
    def host_with_port(self) -> str:
        return f"{self.host}:{self.port}"

    def running(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.config.dev_server_connect_timeout):
                return True
        except OSError as exc:
            logger.debug("Dev server not reachable at %s: %s", self.host_with_port, exc)
            return False
