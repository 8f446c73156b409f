from dataclasses import dataclass

from .strategies import Strategy

DEFAULT_BLOCK_SIZE = 3
DEFAULT_MAX_CALLS = 10_000_000


@dataclass(frozen=True)
class SolverConfig:
    strategies: Strategy = Strategy.ALL     # reductions applied at every search node
    max_calls: int = DEFAULT_MAX_CALLS      # runaway guard on recursive search calls
    box: int = DEFAULT_BLOCK_SIZE           # block side; puzzles are box^2 x box^2

    def __post_init__(self) -> None:
        if self.max_calls < 1:
            raise ValueError(f"max_calls must be positive, got {self.max_calls}")
        if self.box < 1:
            raise ValueError(f"Block size must be positive, got {self.box}")

    @classmethod
    def from_letters(cls, letters: str, **kwargs) -> "SolverConfig":
        return cls(strategies=Strategy.from_letters(letters), **kwargs)
