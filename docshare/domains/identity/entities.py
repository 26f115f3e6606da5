import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Пользователь глазами ядра: только чтение"""
    id: uuid.UUID
    display_name: str
    email: str

    @property
    def first_name(self) -> str:
        parts = self.display_name.split()
        return parts[0] if parts else ""
