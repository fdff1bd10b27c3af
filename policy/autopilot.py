# policy/autopilot.py
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from core.interfaces import (
    DIRECTIONS, Direction, GameMode, Point, Policy, Snapshot, manhattan,
)


@dataclass(frozen=True)
class ScoredMove:
    dir: Direction
    cell: Point      # normalized next head
    space: int       # reachable cells from `cell`
    dist: int        # manhattan distance to the target food


class Board:
    """
    Read-only view of a snapshot for the planner.

    Obstacles are every body segment except the tail, which vacates on the
    move being evaluated. Only WRAP folds coordinates back into the grid;
    every other mode treats the border as solid.
    """
    def __init__(self, snap: Snapshot):
        self.n = snap.grid_size
        self.wrap = snap.mode is GameMode.WRAP
        self.blocked = np.zeros((self.n, self.n), dtype=bool)
        for (x, y) in snap.snake[:-1]:
            self.blocked[y, x] = True

    def normalize(self, p: Point) -> Point:
        if self.wrap:
            return (p[0] % self.n, p[1] % self.n)
        return p

    def collides(self, p: Point) -> bool:
        x, y = self.normalize(p)
        if not (0 <= x < self.n and 0 <= y < self.n):
            return True
        return bool(self.blocked[y, x])

    def reachable(self, start: Point) -> int:
        """BFS flood count from `start`, capped at the number of cells."""
        start = self.normalize(start)
        if self.collides(start):
            return 0
        cap = self.n * self.n
        seen = {start}
        q = deque([start])
        count = 0
        while q and count < cap:
            p = q.popleft()
            count += 1
            for d in DIRECTIONS:
                nb = self.normalize(d.apply(p))
                if nb not in seen and not self.collides(nb):
                    seen.add(nb)
                    q.append(nb)
        return count


def pick_target(snap: Snapshot, board: Optional[Board] = None) -> Optional[Point]:
    """Nearest food to the head; equal distances resolve to the smallest (x, y)."""
    if not snap.foods:
        return None
    board = board or Board(snap)
    head = snap.head
    cells = [board.normalize(f.pos) for f in snap.foods]
    return min(cells, key=lambda c: (manhattan(c, head), c))


def evaluate_moves(snap: Snapshot) -> List[ScoredMove]:
    """Score every legal non-reversing move, in UP, DOWN, LEFT, RIGHT order."""
    board = Board(snap)
    target = pick_target(snap, board)
    if target is None:
        return []
    back = snap.dir.opposite
    scored: List[ScoredMove] = []
    for d in DIRECTIONS:
        nxt = d.apply(snap.head)
        if board.collides(nxt) or d is back:
            continue
        cell = board.normalize(nxt)
        scored.append(ScoredMove(dir=d, cell=cell,
                                 space=board.reachable(cell),
                                 dist=manhattan(cell, target)))
    return scored


def choose_direction(snap: Snapshot) -> Direction:
    """
    Greedy two-tier choice:
      - among moves that leave at least a body length of room, the one
        closest to the target food
      - otherwise the move with the most room
    Falls back to the current heading when there is no food or no move.
    """
    if not snap.foods:
        return snap.dir
    return _decide(snap, evaluate_moves(snap))


def _decide(snap: Snapshot, scored: List[ScoredMove]) -> Direction:
    if not scored:
        return snap.dir
    viable = [m for m in scored if m.space >= len(snap.snake)]
    if viable:
        # min/max keep the first of equal keys -> UP, DOWN, LEFT, RIGHT order
        return min(viable, key=lambda m: m.dist).dir
    return max(scored, key=lambda m: m.space).dir


class AutopilotPolicy(Policy):
    """Stateless planner wrapper; remembers its last evaluation for overlays."""
    def __init__(self):
        self.last_moves: Tuple[ScoredMove, ...] = ()

    def act(self, snap: Snapshot) -> Direction:
        if not snap.foods:
            self.last_moves = ()
            return snap.dir
        scored = evaluate_moves(snap)
        self.last_moves = tuple(scored)
        return _decide(snap, scored)

    def describe(self) -> str:
        return "  ".join(f"{m.dir.value[0]}:{m.space}/{m.dist}" for m in self.last_moves)
