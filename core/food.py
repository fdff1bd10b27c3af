# core/food.py  (food placement, pure)
from __future__ import annotations
import random
from typing import Iterable, List, Sequence, Tuple

from .interfaces import Food, Point

def free_cell_count(grid_size: int, snake: Sequence[Point]) -> int:
    return grid_size * grid_size - len(set(snake))

def place_foods(
    snake: Sequence[Point],
    existing: Iterable[Food],
    count: int,
    grid_size: int,
    rng: random.Random,
    now: float = 0.0,
) -> Tuple[Food, ...]:
    """
    Top the food set up to `count` by rejection sampling.

    Draws uniform cells and rejects those on the snake or on another food.
    The target is capped at the number of cells the snake leaves free, so the
    loop always terminates; an infeasible count is not an error.
    """
    foods: List[Food] = list(existing)
    occ = set(snake)
    taken = {f.pos for f in foods}
    want = min(count, free_cell_count(grid_size, snake))
    while len(foods) < want:
        p = (rng.randrange(grid_size), rng.randrange(grid_size))
        if p in occ or p in taken:
            continue
        foods.append(Food(pos=p, born_at=now))
        taken.add(p)
    return tuple(foods)

def expire_foods(foods: Iterable[Food], now: float, ttl: float | None) -> Tuple[Food, ...]:
    """Drop foods older than `ttl` seconds (fading food). No ttl keeps everything."""
    if ttl is None:
        return tuple(foods)
    return tuple(f for f in foods if now - f.born_at < ttl)
