"""Macro pack registry: the default macro implementations shipped per dialect."""

from __future__ import annotations

from sqltemplates.dialect.base import MacroPack


class UnsupportedDialectError(Exception):
    """Raised when a requested dialect has no shipped macro pack."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.dialect_name = name
        self.available = available
        super().__init__(f"Unsupported dialect '{name}'. Available: {', '.join(available)}")


class DuplicatePackError(Exception):
    """Raised when two packs claim the same dialect name."""

    def __init__(self, name: str) -> None:
        self.dialect_name = name
        super().__init__(f"A macro pack is already registered for dialect '{name}'")


class PackRegistry:
    """Registry for shipped macro packs, keyed by dialect name and alias."""

    _packs: dict[str, type[MacroPack]] = {}

    @classmethod
    def register(cls, pack_class: type[MacroPack]) -> type[MacroPack]:
        """Register a pack class under its name and aliases. Can be used as a decorator."""
        # Instantiate to read the name property
        instance = pack_class()
        names = (instance.name, *instance.aliases)
        for name in names:
            if name in cls._packs:
                raise DuplicatePackError(name)
        for name in names:
            cls._packs[name] = pack_class
        return pack_class

    @classmethod
    def find(cls, name: str) -> MacroPack | None:
        """Return the pack serving ``name``, or ``None`` when there is none."""
        pack_class = cls._packs.get(name.strip().lower())
        return pack_class() if pack_class is not None else None

    @classmethod
    def get(cls, name: str) -> MacroPack:
        """Get an instance of the pack serving ``name``."""
        pack = cls.find(name)
        if pack is None:
            raise UnsupportedDialectError(name, available=cls.available())
        return pack

    @classmethod
    def available(cls) -> list[str]:
        """List dialect names (including aliases) that have a shipped pack."""
        return sorted(cls._packs.keys())
