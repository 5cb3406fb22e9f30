"""Validation of the Host header, guarding a local server against DNS rebinding."""

import logging

logger = logging.getLogger(__name__)

LOCAL_ADDRESSES = ("127.0.0.1", "localhost")
VALID_HOSTS = ("127.0.0.1", "localhost")


class HostCheck:
    """Decides whether a request's Host header is acceptable.

    Validation is only enabled when the server binds a local address; a
    server listening on a public address accepts every request.
    """

    def __init__(self, address: str) -> None:
        self.validate = address in LOCAL_ADDRESSES
        if not self.validate:
            logger.warning("Host header validation is turned off, this is a security risk")

    def is_allowed(self, host_header: str | None) -> bool:
        """True if a request carrying this Host header (or none) may proceed."""
        if not self.validate:
            return True
        if host_header is None:
            logger.info("Missing 'Host' header, denying request")
            return False
        host = host_header.split(":")[0]
        if host not in VALID_HOSTS:
            logger.info("Host header '%s' not allowed, denying request", host_header)
            return False
        return True