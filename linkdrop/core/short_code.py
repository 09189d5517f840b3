"""
Short code allocation.

Draws six-character public identifiers from an alphabet without the
ambiguous characters O and 0, re-drawing on collision with existing
records (files and links share one namespace).

The existence check is a fast path only. The UNIQUE constraint on
files.short_code is the source of truth, and callers that hit an
IntegrityError on insert treat it as one more collision.

Dependencies: secrets, re, linkdrop.boundary.db.CRUD
System role: Collision-free identifier generation for uploads
"""

import logging
import re
import secrets
from typing import Awaitable, Callable, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from linkdrop.boundary.db.CRUD.file_crud import file_crud
from linkdrop.core.exceptions import AllocationExhaustedError

logger = logging.getLogger(__name__)

ALPHABET = "ABCDEFGHIJKLMNPQRSTUVWXYZ123456789"
CODE_LENGTH = 6
MAX_ATTEMPTS = 100

SHORT_CODE_PATTERN = re.compile(r"^[A-Z0-9]{6}$")

CodeExists = Callable[[AsyncSession, str], Awaitable[bool]]


class ShortCodeAllocator:
    """
    Allocate unique short codes against the live store.

    Attributes:
        code_exists: Async predicate reporting whether a code is already taken
        max_attempts: Consecutive collisions tolerated before giving up
    """

    def __init__(
        self,
        code_exists: CodeExists | None = None,
        max_attempts: int = MAX_ATTEMPTS,
        draw: Callable[[], str] | None = None,
    ) -> None:
        """
        Initialize allocator.

        Args:
            code_exists: Existence check, defaults to file_crud.short_code_exists
            max_attempts: Upper bound on consecutive collisions
            draw: Candidate generator, defaults to a uniform draw from ALPHABET
        """
        self.code_exists = code_exists or file_crud.short_code_exists
        self.max_attempts = max_attempts
        self._draw = draw or self.random_code

    @staticmethod
    def random_code() -> str:
        """Draw CODE_LENGTH characters uniformly from ALPHABET."""
        return "".join(secrets.choice(ALPHABET) for _ in range(CODE_LENGTH))

    async def allocate(
        self,
        session: AsyncSession,
        exclude: Iterable[str] | None = None,
    ) -> str:
        """
        Draw a code not present in the store nor in exclude.

        Args:
            session: Async database session used for existence checks
            exclude: Codes reserved in memory but not yet persisted

        Returns:
            str: Unused short code

        Raises:
            AllocationExhaustedError: After max_attempts consecutive collisions
        """
        excluded = set(exclude or ())
        for attempt in range(1, self.max_attempts + 1):
            candidate = self._draw()
            if candidate in excluded:
                continue
            if await self.code_exists(session, candidate):
                logger.debug(
                    "Short code collision",
                    extra={"short_code": candidate, "attempt": attempt},
                )
                continue
            return candidate

        logger.error(
            "Short code allocation exhausted",
            extra={"attempts": self.max_attempts},
        )
        raise AllocationExhaustedError(self.max_attempts)

    async def allocate_batch(self, session: AsyncSession, count: int) -> list[str]:
        """
        Allocate count codes that are unique among themselves and the store.

        Args:
            session: Async database session used for existence checks
            count: Number of codes to allocate

        Returns:
            list[str]: Distinct unused short codes
        """
        codes: list[str] = []
        for _ in range(count):
            codes.append(await self.allocate(session, exclude=codes))
        return codes

    @staticmethod
    def is_valid(code: str) -> bool:
        """Check a candidate against the public short code format."""
        return bool(SHORT_CODE_PATTERN.match(code or ""))

    @staticmethod
    def normalize(code: str) -> str:
        """Upper-case user input and strip anything that is not alphanumeric."""
        return re.sub(r"[^A-Z0-9]", "", (code or "").upper())
