"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators the services call (DIP).
"""

from __future__ import annotations

from typing import Any, Protocol


class IIssuedToken(Protocol):
    token: str
    token_id: str
    expires_in: int
    token_type: str


class ITokenIssuer(Protocol):
    """Issues and decodes bearer tokens carrying a session token id."""

    def issue(self, user_id: int) -> IIssuedToken: ...

    def decode(self, token: str) -> tuple[int, str]:
        """Return (user_id, token_id); raise ValueError if the token is not valid."""


class IPasswordHasher(Protocol):
    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, digest: str) -> bool: ...


class IEmailSender(Protocol):
    async def send(
        self, template: str, recipient: str, variables: dict[str, Any]
    ) -> None:
        """Deliver the rendered template; raise EmailDeliveryException on failure."""


class IStorageService(Protocol):
    async def put(self, path: str, data: bytes) -> str: ...

    async def delete(self, path: str) -> bool: ...

    async def exists(self, path: str) -> bool: ...

    def url(self, path: str) -> str: ...


class ILoginAttemptTracker(Protocol):
    def check(self, identifier: str) -> None: ...

    def hit(self, identifier: str) -> None: ...

    def clear(self, identifier: str) -> None: ...
