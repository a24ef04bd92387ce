# status_bot/notifiers/base.py
"""
notifiers/base.py
-----------------
A single-method interface every notifier must implement.
"""
from __future__ import annotations
from abc import ABC, abstractmethod


class BaseNotifier(ABC):
    """Every concrete notifier must implement send()."""

    @abstractmethod
    async def send(self, text: str) -> None:
        """Deliver one pre-formatted message; raise a ServiceError on failure."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release transport resources, if any."""
