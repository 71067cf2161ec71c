# storefront_catalog/models/outcome.py

"""Typed results for strategy attempts and whole-ladder runs."""

from dataclasses import dataclass, field
from enum import Enum, auto

from storefront_catalog.models.product import Product


class OutcomeKind(Enum):
    """How a single strategy attempt ended."""

    SUCCESS = auto()
    EMPTY = auto()
    FAILURE = auto()


@dataclass(frozen=True)
class StrategyOutcome:
    """Result of running one strategy of the ladder."""

    strategy: str
    kind: OutcomeKind
    products: tuple[Product, ...] = ()
    reason: str = ""
    elapsed: float = 0.0
    deduplicated_count: int = 0
    invalid_count: int = 0

    @property
    def accepted(self) -> bool:
        """True when the ladder may stop at this strategy."""
        return self.kind is OutcomeKind.SUCCESS and bool(self.products)

    @classmethod
    def success(
        cls,
        strategy: str,
        products: list[Product],
        elapsed: float = 0.0,
        deduplicated_count: int = 0,
        invalid_count: int = 0,
    ) -> "StrategyOutcome":
        return cls(
            strategy=strategy,
            kind=OutcomeKind.SUCCESS,
            products=tuple(products),
            elapsed=elapsed,
            deduplicated_count=deduplicated_count,
            invalid_count=invalid_count,
        )

    @classmethod
    def empty(
        cls,
        strategy: str,
        reason: str,
        elapsed: float = 0.0,
        invalid_count: int = 0,
    ) -> "StrategyOutcome":
        return cls(
            strategy=strategy,
            kind=OutcomeKind.EMPTY,
            reason=reason,
            elapsed=elapsed,
            invalid_count=invalid_count,
        )

    @classmethod
    def failure(
        cls,
        strategy: str,
        reason: str,
        elapsed: float = 0.0,
    ) -> "StrategyOutcome":
        return cls(
            strategy=strategy,
            kind=OutcomeKind.FAILURE,
            reason=reason,
            elapsed=elapsed,
        )


@dataclass
class CatalogResult:
    """Container for a completed ladder run."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    source: str = ""
    attempts: list[StrategyOutcome] = field(
        default_factory=lambda: list[StrategyOutcome]()
    )
    used_fallback: bool = False
    deduplicated_count: int = 0
    invalid_count: int = 0
