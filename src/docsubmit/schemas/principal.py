from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """Signed-in caller identity."""

    id: str
    email: str
