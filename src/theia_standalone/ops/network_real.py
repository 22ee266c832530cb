"""Real network operations using sockets."""

import socket

from theia_standalone.ops.network import Network

# Seconds a single connection attempt may take
CONNECT_TIMEOUT = 1.0


class RealNetwork(Network):
    """Production implementation opening a throwaway TCP connection."""

    def is_port_open(self, host: str, port: int) -> bool:
        try:
            with socket.create_connection((host, port), timeout=CONNECT_TIMEOUT):
                return True
        except OSError:
            return False
