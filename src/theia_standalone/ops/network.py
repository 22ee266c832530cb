"""Network operations interface for readiness checks."""

from abc import ABC, abstractmethod


class Network(ABC):
    """Abstract interface for probing local TCP ports."""

    @abstractmethod
    def is_port_open(self, host: str, port: int) -> bool:
        """Return True if a TCP connection to host:port succeeds.

        Args:
            host: Host name or address to connect to
            port: TCP port number
        """
        ...
