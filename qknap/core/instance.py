"""
Knapsack Instance and Selection Register Layout
================================================

Data model shared by every circuit builder:

- KnapsackInstance: item weights, profits, per-type bounds and the capacity W
- SelectionLayout: (offset, width) bookkeeping of the per-item sub-registers
  inside one flat selection register

Register sizing:
----------------
Item i may be selected 0..bound[i] times, so its count lives in
    w[i] = ceil(log2(bound[i] + 1))
qubits. Values above bound[i] are representable and are rejected by the
bounds checker, not by the encoding.

Author: QKnap Research Team
Date: October 2026
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple


class ConfigurationError(ValueError):
    """Raised when an instance violates the model's structural constraints."""


def register_width(values: Sequence[int], bounds: Sequence[int]) -> int:
    """
    Width of a register holding Σ value[i]·bound[i] without overflow.

    Equals ceil(log2(Σ value[i]·bound[i] + 1)); for a non-negative integer x
    this is exactly x.bit_length().
    """
    return sum(v * b for v, b in zip(values, bounds)).bit_length()


@dataclass(frozen=True)
class RegisterView:
    """Item-indexed window (offset, width) into the flat selection register."""
    item: int
    offset: int
    width: int

    def qubits(self, register) -> List:
        return list(register[self.offset:self.offset + self.width])

    def read(self, bits: Sequence[bool]) -> int:
        value = 0
        for k in range(self.width):
            if bits[self.offset + k]:
                value |= 1 << k
        return value


@dataclass(frozen=True)
class KnapsackInstance:
    """
    Bounded knapsack instance.

    Attributes
    ----------
    weights : Tuple[int, ...]
        Per-unit weight of each item type
    profits : Tuple[int, ...]
        Per-unit profit of each item type
    bounds : Tuple[int, ...]
        Maximum number of copies of each item type (>= 1)
    capacity : int
        Weight limit W
    """
    weights: Tuple[int, ...]
    profits: Tuple[int, ...]
    bounds: Tuple[int, ...]
    capacity: int

    def __post_init__(self) -> None:
        object.__setattr__(self, 'weights', tuple(int(w) for w in self.weights))
        object.__setattr__(self, 'profits', tuple(int(p) for p in self.profits))
        object.__setattr__(self, 'bounds', tuple(int(b) for b in self.bounds))

        n = len(self.weights)
        if n == 0:
            raise ConfigurationError("Instance must contain at least one item type.")
        if len(self.profits) != n or len(self.bounds) != n:
            raise ConfigurationError(
                f"Mismatched item arrays: {n} weights, {len(self.profits)} profits, "
                f"{len(self.bounds)} bounds."
            )
        for i, (w, p, b) in enumerate(zip(self.weights, self.profits, self.bounds)):
            if w < 0 or p < 0:
                raise ConfigurationError(f"Item[{i}] weight and profit must be >= 0.")
            if b < 1:
                raise ConfigurationError(f"Item[{i}] bound must be >= 1, got {b}.")
        if self.capacity < 0:
            raise ConfigurationError(f"Capacity must be >= 0, got {self.capacity}.")

    @classmethod
    def zero_one(cls, weights: Sequence[int], profits: Sequence[int], capacity: int) -> 'KnapsackInstance':
        """0/1 variant: every item type is selected at most once."""
        return cls(tuple(weights), tuple(profits), (1,) * len(weights), capacity)

    @property
    def n_items(self) -> int:
        return len(self.weights)

    @property
    def is_zero_one(self) -> bool:
        return all(b == 1 for b in self.bounds)

    @property
    def weight_width(self) -> int:
        return register_width(self.weights, self.bounds)

    @property
    def profit_width(self) -> int:
        return register_width(self.profits, self.bounds)

    def evaluate(self, counts: Sequence[int]) -> Tuple[int, int]:
        """Return (total_weight, total_profit) of a selection."""
        weight = sum(w * c for w, c in zip(self.weights, counts))
        profit = sum(p * c for p, c in zip(self.profits, counts))
        return weight, profit

    def layout(self) -> 'SelectionLayout':
        return SelectionLayout.from_bounds(self.bounds)


@dataclass(frozen=True)
class SelectionLayout:
    """
    Jagged decomposition of the flat selection register.

    Each item's (offset, width) pair is computed once; views index into the
    shared register and never copy it.
    """
    views: Tuple[RegisterView, ...]
    num_qubits: int = field(default=0)

    @classmethod
    def from_bounds(cls, bounds: Sequence[int]) -> 'SelectionLayout':
        views = []
        offset = 0
        for i, bound in enumerate(bounds):
            width = int(bound).bit_length()
            views.append(RegisterView(item=i, offset=offset, width=width))
            offset += width
        return cls(views=tuple(views), num_qubits=offset)

    def __len__(self) -> int:
        return len(self.views)

    def __getitem__(self, item: int) -> RegisterView:
        return self.views[item]

    def __iter__(self):
        return iter(self.views)

    @property
    def search_space(self) -> int:
        """N = 2^Q basis states of the selection register."""
        return 2 ** self.num_qubits

    def decode(self, bits: Sequence[bool]) -> Tuple[int, ...]:
        """Measured little-endian bits → per-item unsigned counts."""
        if len(bits) != self.num_qubits:
            raise ValueError(f"Expected {self.num_qubits} bits, got {len(bits)}")
        return tuple(view.read(bits) for view in self.views)

    def encode(self, counts: Sequence[int]) -> List[bool]:
        """Per-item counts → little-endian bits of the flat register."""
        if len(counts) != len(self.views):
            raise ValueError(f"Expected {len(self.views)} counts, got {len(counts)}")
        bits = [False] * self.num_qubits
        for view, count in zip(self.views, counts):
            if count < 0 or count >= 2 ** view.width:
                raise ValueError(
                    f"Count {count} for item {view.item} does not fit in {view.width} bits"
                )
            for k in range(view.width):
                bits[view.offset + k] = bool((count >> k) & 1)
        return bits
