"""
Table-region credit ledger.

Every ``[table]`` region in an export costs one credit. The ledger itself is
plain storage; the compiler only reads the balance and writes it back once,
before any rendering starts.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from .engine import directives
from .exceptions import QuotaError
from .models.node import ContainerNode, ContainerType, DesignNode, iter_tree

logger = logging.getLogger(__name__)

DEFAULT_CREDITS = 5

TABLE_CONTAINER_TYPES = (ContainerType.FRAME, ContainerType.GROUP)


class CreditLedger(ABC):
    """Persistent credit balance."""

    @abstractmethod
    async def balance(self) -> int:
        """Current balance."""

    @abstractmethod
    async def set_balance(self, value: int) -> None:
        """Persist a new balance."""


class MemoryCreditLedger(CreditLedger):
    def __init__(self, initial: int = DEFAULT_CREDITS):
        self._balance = initial

    async def balance(self) -> int:
        return self._balance

    async def set_balance(self, value: int) -> None:
        self._balance = value


class JsonCreditLedger(CreditLedger):
    """
    Ledger stored as ``{"tableCredits": n}`` in a JSON file.

    A missing file or a non-numeric value reads as the default balance.
    """

    KEY = "tableCredits"

    def __init__(self, path: Union[str, Path], default: int = DEFAULT_CREDITS):
        self.path = Path(path)
        self.default = default

    async def balance(self) -> int:
        return await asyncio.to_thread(self._read)

    async def set_balance(self, value: int) -> None:
        await asyncio.to_thread(self._write, value)

    def _read(self) -> int:
        if not self.path.exists():
            return self.default
        data = json.loads(self.path.read_text(encoding="utf-8"))
        stored = data.get(self.KEY) if isinstance(data, dict) else None
        if isinstance(stored, int) and not isinstance(stored, bool):
            return stored
        return self.default

    def _write(self, value: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({self.KEY: value}), encoding="utf-8")


def is_table_region(node: DesignNode) -> bool:
    return (
        isinstance(node, ContainerNode)
        and node.container_type in TABLE_CONTAINER_TYPES
        and directives.has_directive(node.name, directives.TABLE)
    )


def count_table_regions(root: DesignNode) -> int:
    """Number of ``[table]`` frames and groups anywhere under (and including) ``root``."""
    return sum(1 for node in iter_tree(root) if is_table_region(node))


async def reserve_table_credits(ledger: CreditLedger, required: int) -> int:
    """
    Check and deduct ``required`` credits.

    Args:
        ledger: Credit ledger
        required: Number of table regions in the export

    Returns:
        The remaining balance

    Raises:
        QuotaError: If the balance is insufficient (nothing is deducted) or
            the ledger cannot be read or written
    """
    try:
        current = await ledger.balance()
    except (OSError, ValueError) as e:
        logger.error(f"Credit storage error: {e}")
        raise QuotaError("Error managing credits. Please try again.") from e

    if current < required:
        raise QuotaError(
            f"Insufficient credits. This export requires {required} credits, "
            f"but you have {current}. Please purchase more credits."
        )

    remaining = current - required
    try:
        await ledger.set_balance(remaining)
    except (OSError, ValueError) as e:
        logger.error(f"Credit storage error: {e}")
        raise QuotaError("Error managing credits. Please try again.") from e

    logger.info(f"Reserved {required} table credit(s), {remaining} left")
    return remaining
