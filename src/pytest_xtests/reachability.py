import logging
import socket

from .constants import REACHABILITY_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


def split_host(host: str, scheme: str) -> tuple[str, int]:
    """Split ``host[:port]`` into name and port, defaulting the port from the scheme."""
    if host.startswith("["):
        name, _, rest = host[1:].partition("]")
        port = rest.removeprefix(":")
    else:
        name, _, port = host.partition(":")
    return name, int(port) if port.isdigit() else DEFAULT_PORTS.get(scheme, 80)


def is_reachable(host: str, scheme: str = "https", timeout: float = REACHABILITY_TIMEOUT) -> bool:
    """Check whether a TCP connection to the host can be opened."""
    name, port = split_host(host, scheme)
    try:
        with socket.create_connection((name, port), timeout=timeout):
            return True
    except OSError as e:
        logger.info(f"Host {name}:{port} is not reachable: {str(e)}")
        return False
