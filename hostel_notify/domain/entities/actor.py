"""Domain entity describing who performs an operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """Authenticated user identity as supplied by the auth layer."""

    id: int
    role: str

    def is_privileged(self, privileged_roles: frozenset[str]) -> bool:
        """Return ``True`` when the actor's role grants access to every record."""

        return self.role.lower() in privileged_roles


__all__ = ["Actor"]
