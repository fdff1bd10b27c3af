# viz/keyboard.py
import pygame as pg
from core.interfaces import Direction

KEY_MAP = {
    pg.K_UP: Direction.UP, pg.K_w: Direction.UP,
    pg.K_DOWN: Direction.DOWN, pg.K_s: Direction.DOWN,
    pg.K_LEFT: Direction.LEFT, pg.K_a: Direction.LEFT,
    pg.K_RIGHT: Direction.RIGHT, pg.K_d: Direction.RIGHT,
}

class Keyboard:
    """Turns pygame events into commands: a Direction, or one of
    "quit", "space", "pause"."""
    def poll(self):
        cmds = []
        for e in pg.event.get():
            if e.type == pg.QUIT:
                return ["quit"]
            if e.type == pg.KEYDOWN:
                if e.key == pg.K_ESCAPE: return ["quit"]
                if e.key == pg.K_SPACE: cmds.append("space")
                elif e.key == pg.K_p: cmds.append("pause")
                elif e.key in KEY_MAP: cmds.append(KEY_MAP[e.key])
        return cmds
