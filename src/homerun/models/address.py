"""Address pair model."""

from __future__ import annotations

from homerun.models._base import HomeRunBaseModel


class AddressPair(HomeRunBaseModel):
    """Free-text home and work addresses.

    No validation is applied beyond stripping; traffic checks require both
    to be non-empty (see :attr:`is_complete`).
    """

    home: str = ""
    work: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.home.strip()) and bool(self.work.strip())
