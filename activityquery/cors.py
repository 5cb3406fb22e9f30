"""Cross-origin request policy of the server."""

import re
from dataclasses import dataclass

from .config import AWConfig

ALLOWED_METHODS = frozenset({"GET", "POST", "DELETE"})


@dataclass(frozen=True)
class CorsPolicy:
    """Origins and methods that cross-origin requests may use.

    Regex origins are searched for anywhere in the origin, not anchored.
    """

    exact_origins: tuple[str, ...]
    regex_origins: tuple[str, ...]
    allowed_methods: frozenset[str] = ALLOWED_METHODS
    allow_credentials: bool = False

    def allows_origin(self, origin: str) -> bool:
        if origin in self.exact_origins:
            return True
        return any(re.search(pattern, origin) for pattern in self.regex_origins)

    def allows_method(self, method: str) -> bool:
        return method.upper() in self.allowed_methods


def cors_policy(config: AWConfig) -> CorsPolicy:
    """Build the policy for a server configuration."""
    exact = [
        f"http://127.0.0.1:{config.port}",
        f"http://localhost:{config.port}",
        *config.cors,
    ]
    if config.testing:
        exact += ["http://127.0.0.1:27180", "http://localhost:27180"]

    regexes = [
        "chrome-extension://nglaklhklhcoonedhgnpgddginnjdadi",
        # Each version of a Firefox extension gets its own id, so all must be allowed.
        "moz-extension://.*",
    ]
    if config.testing:
        regexes.append("chrome-extension://.*")

    return CorsPolicy(exact_origins=tuple(exact), regex_origins=tuple(regexes))