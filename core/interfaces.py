# core/interfaces.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Protocol, Optional, Callable

Point = Tuple[int, int]

class Direction(Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def offset(self) -> Point:
        return OFFSETS[self]

    @property
    def opposite(self) -> "Direction":
        return OPPOSITE[self]

    def apply(self, p: Point) -> Point:
        dx, dy = OFFSETS[self]
        return (p[0] + dx, p[1] + dy)

# screen coordinates: y grows downward
OFFSETS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

OPPOSITE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# evaluation order for the planner and tie-breaks
DIRECTIONS: Tuple[Direction, ...] = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)

class GameMode(Enum):
    NORMAL = "NORMAL"   # walls kill
    WRAP = "WRAP"       # toroidal grid
    STOP = "STOP"       # wall blocks the move
    GOD = "GOD"         # nothing is fatal

class GameStatus(Enum):
    IDLE = "IDLE"
    PLAYING = "PLAYING"
    PAUSED = "PAUSED"
    GAME_OVER = "GAME_OVER"
    WON = "WON"
    STALLED = "STALLED"

    @property
    def terminal(self) -> bool:
        return self in (GameStatus.GAME_OVER, GameStatus.WON, GameStatus.STALLED)

class TickOutcome(Enum):
    MOVED = "moved"
    ATE = "ate"
    BLOCKED = "blocked"     # move discarded, snake stays put
    LOST = "lost"
    WON = "won"
    STALLED = "stalled"
    IGNORED = "ignored"     # not playing, nothing happened

    @property
    def fatal(self) -> bool:
        return self is TickOutcome.LOST

@dataclass(frozen=True)
class Food:
    pos: Point
    born_at: float = 0.0

@dataclass(frozen=True)
class Snapshot:
    snake: Tuple[Point, ...]   # head first
    foods: Tuple[Food, ...]
    dir: Direction
    score: int
    status: GameStatus
    steps_since_food: int
    step_count: int
    reason: str | None
    grid_size: int
    mode: GameMode
    target_score: int

    @property
    def head(self) -> Point:
        return self.snake[0]

    @property
    def food_cells(self) -> Tuple[Point, ...]:
        return tuple(f.pos for f in self.foods)

def manhattan(a: Point, b: Point) -> int:
    return abs(a[0]-b[0]) + abs(a[1]-b[1])

class Policy(Protocol):
    def act(self, snap: Snapshot) -> Direction: ...

class SnapshotSink(Protocol):
    def push(self, snap: Snapshot) -> None: ...

StatusListener = Callable[[GameStatus, int], None]
Clock = Callable[[], float]
