# src/dbtest/asserts/rule_types.py
"""Registry of sharding rule types seen while loading."""

from __future__ import annotations

from collections.abc import Iterator

from dbtest.contracts.asserts import split_tokens


class RuleTypeRegistry:
    """Accumulates distinct rule-type tokens during one load pass.

    Grows monotonically until ``freeze()`` is called; after that it
    rejects further registration.
    """

    def __init__(self) -> None:
        self._tokens: set[str] = set()
        self._frozen = False

    def register(self, raw: str | None) -> tuple[str, ...]:
        """Add every token of a comma-separated rule-type list.

        Returns:
            The tokens that were registered (empty for None/blank input).
        """
        if self._frozen:
            raise RuntimeError("RuleTypeRegistry is frozen")
        tokens = split_tokens(raw)
        self._tokens.update(tokens)
        return tokens

    def freeze(self) -> frozenset[str]:
        """Stop accepting tokens and return the final snapshot."""
        self._frozen = True
        return frozenset(self._tokens)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)
