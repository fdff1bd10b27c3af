# viz/renderer_pygame.py
from __future__ import annotations
import os
from typing import Optional
import pygame as pg
from config import AppConfig
from core.interfaces import GameStatus, Snapshot
from viz.render_iface import Hud
import viz.renderer_colors as theme

PANEL_PX = 56   # commentary strip under the board

STATUS_TEXT = {
    GameStatus.IDLE: "SPACE to start",
    GameStatus.PAUSED: "PAUSED  (P to resume)",
    GameStatus.GAME_OVER: "SYSTEM FAILURE  (SPACE: menu)",
    GameStatus.WON: "TARGET REACHED  (SPACE: menu)",
    GameStatus.STALLED: "STALLED  (SPACE: menu)",
}

class PygameRenderer:
    def __init__(self):
        self.cell = 24
        self.cfg: Optional[AppConfig] = None
        self.surf: Optional[pg.Surface] = None
        self.clock: Optional[pg.time.Clock] = None
        self._auto_flip = True
        self._board_px = 0
        self._frame_idx = 0
        self._font: Optional[pg.font.Font] = None
        self._big: Optional[pg.font.Font] = None

    def open(self, cfg: AppConfig) -> None:
        # Guard: ensure instance, not class
        if isinstance(cfg, type):
            raise TypeError("Pass an AppConfig instance (use AppConfig()), not the class.")
        self.cfg = cfg
        self.cell = cfg.render_cell
        self._board_px = cfg.grid_size * self.cell

        pg.init()
        pg.display.set_caption(cfg.render_title)
        self.surf = pg.display.set_mode((self._board_px, self._board_px + PANEL_PX))
        self.clock = pg.time.Clock()
        self._auto_flip = True
        self._frame_idx = 0
        self._init_fonts()

        if cfg.render_record_dir:
            os.makedirs(cfg.render_record_dir, exist_ok=True)

    def attach_surface(self, surface: pg.Surface, cfg: AppConfig) -> None:
        """Draw into a caller-owned surface (tests, embedding)."""
        if not pg.get_init():
            pg.init()
        self.cfg = cfg
        self.cell = cfg.render_cell
        self._board_px = cfg.grid_size * self.cell
        self.surf = surface
        self.clock = None
        self._auto_flip = False
        self._init_fonts()

    def _init_fonts(self) -> None:
        if not pg.font.get_init():
            pg.font.init()
        self._font = pg.font.SysFont(None, 22)
        self._big = pg.font.SysFont(None, 34)

    def draw(self, s: Snapshot, hud: Optional[Hud] = None) -> None:
        if self.surf is None or self.cfg is None:
            raise RuntimeError("Renderer not opened")
        hud = hud or Hud()
        surf = self.surf
        c = self.cell

        surf.fill(theme.BG)

        if self.cfg.render_grid_lines:
            for i in range(1, s.grid_size):
                pg.draw.line(surf, theme.GRID, (i * c, 0), (i * c, self._board_px))
                pg.draw.line(surf, theme.GRID, (0, i * c), (self._board_px, i * c))

        for f in s.foods:
            fx, fy = f.pos
            pg.draw.ellipse(surf, theme.FOOD, pg.Rect(fx * c + 2, fy * c + 2, c - 4, c - 4))

        for i, (x, y) in enumerate(s.snake):
            col = theme.HEAD if i == 0 else theme.BODY
            pg.draw.rect(surf, col, pg.Rect(x * c + 1, y * c + 1, c - 2, c - 2), border_radius=3)

        if self.cfg.render_show_hud:
            self._draw_hud(s, hud)

        if s.status is not GameStatus.PLAYING:
            self._draw_status(s)

        self._draw_panel(hud)

        if self._auto_flip:
            pg.display.flip()

        if self.cfg.render_record_dir:
            self._save_surface_frame()

    def _draw_hud(self, s: Snapshot, hud: Hud) -> None:
        txt = self._font.render(
            f"Score: {s.score:03d}   High: {max(hud.high_score, s.score):03d}   Mode: {s.mode.value}",
            True, theme.TEXT
        )
        self.surf.blit(txt, (6, 4))
        if hud.autopilot:
            tag = self._font.render("AI AUTOPILOT ACTIVE", True, theme.AUTOPILOT)
            self.surf.blit(tag, (self._board_px - tag.get_width() - 6, 4))
        if hud.overlay:
            ovr = self._font.render(hud.overlay, True, theme.MUTED)
            self.surf.blit(ovr, (6, 24))

    def _draw_status(self, s: Snapshot) -> None:
        shade = pg.Surface((self._board_px, self._board_px), pg.SRCALPHA)
        shade.fill((2, 6, 23, 200))
        self.surf.blit(shade, (0, 0))
        col = theme.STATUS.get(s.status.value, theme.TEXT)
        title = self._big.render(STATUS_TEXT.get(s.status, s.status.value), True, col)
        self.surf.blit(title, title.get_rect(center=(self._board_px // 2, self._board_px // 2)))
        if s.status.terminal:
            sub = self._font.render(f"Final score: {s.score}", True, theme.TEXT)
            self.surf.blit(sub, sub.get_rect(center=(self._board_px // 2, self._board_px // 2 + 30)))

    def _draw_panel(self, hud: Hud) -> None:
        if self.surf.get_height() <= self._board_px:
            return
        panel = pg.Rect(0, self._board_px, self._board_px, self.surf.get_height() - self._board_px)
        pg.draw.rect(self.surf, theme.PANEL, panel)
        if hud.commentary is None:
            line, col = "Start a run to wake the commentator.", theme.MUTED
        else:
            line = f"\"{hud.commentary.message}\""
            col = theme.COMMENTARY.get(hud.commentary.type, theme.TEXT)
        txt = self._font.render(line, True, col)
        self.surf.blit(txt, (6, self._board_px + 8))

    def tick(self, fps: int) -> None:
        if self.clock:
            self.clock.tick(fps)

    def close(self) -> None:
        try:
            pg.quit()
        finally:
            self.surf = None
            self.clock = None

    # internals
    def _save_surface_frame(self) -> None:
        fname = os.path.join(self.cfg.render_record_dir, f"frame_{self._frame_idx:06d}.png")
        pg.image.save(self.surf, fname)
        self._frame_idx += 1
