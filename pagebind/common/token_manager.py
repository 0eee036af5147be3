"""
================================================================================
Token Manager
================================================================================

Scenario-scoped token substitution for data entered into or compared against
page properties.

Token syntax:
    {name:value}        Store "value" under "name" and substitute it
    {name}              Substitute a previously stored value
    {randomint}         Random integer
    {randomguid}        Random UUID4
    {randomstring:N}    Random ASCII letters of length N

Unknown tokens are left in place so literal braces survive.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import random
import re
import string
import uuid
from typing import Any, Callable, Dict, Optional

from loguru import logger

from .lookup import to_lookup_key


TOKEN_PATTERN = re.compile(r"\{([^{}:]+)(?::([^{}]*))?\}")


class TokenManager:
    """
    Stores named tokens and expands token expressions in strings.

    Usage:
        >>> tokens = TokenManager()
        >>> tokens.set_token("{user:alice}")
        'alice'
        >>> tokens.set_token("Hello {user}")
        'Hello alice'
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the token manager.

        Args:
            context: Backing store (e.g. a scenario context dict). A new dict
                is used if omitted.
        """
        self._context: Dict[str, Any] = context if context is not None else {}
        self._generators: Dict[str, Callable[[Optional[str]], str]] = {
            "randomint": self._random_int,
            "randomguid": self._random_guid,
            "randomstring": self._random_string,
        }

    @staticmethod
    def _key(name: str) -> str:
        return f"TOKEN:{to_lookup_key(name).upper()}"

    def get_token(self, name: str) -> Optional[str]:
        """Return the stored value for `name`, or None."""
        return self._context.get(self._key(name))

    def store_token(self, name: str, value: str) -> None:
        """Store `value` under `name`."""
        self._context[self._key(name)] = value
        logger.debug(f"Stored token '{name}'")

    def set_token(self, token_string: Optional[str]) -> Optional[str]:
        """
        Expand every token expression in `token_string`.

        Args:
            token_string: Text possibly containing token expressions

        Returns:
            Text with tokens substituted (None stays None)
        """
        if not token_string:
            return token_string
        return TOKEN_PATTERN.sub(self._replace, token_string)

    def _replace(self, match: "re.Match[str]") -> str:
        name, argument = match.group(1).strip(), match.group(2)
        generator = self._generators.get(to_lookup_key(name))
        if generator is not None:
            return generator(argument)

        if argument is not None:
            self.store_token(name, argument)
            return argument

        stored = self.get_token(name)
        return match.group(0) if stored is None else str(stored)

    @staticmethod
    def _random_int(argument: Optional[str]) -> str:
        return str(random.randint(0, 2 ** 31 - 1))

    @staticmethod
    def _random_guid(argument: Optional[str]) -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _random_string(argument: Optional[str]) -> str:
        try:
            length = int(argument) if argument else 10
        except ValueError:
            length = 10
        return "".join(random.choices(string.ascii_letters, k=length))


__all__ = ["TokenManager", "TOKEN_PATTERN"]
