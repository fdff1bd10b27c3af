import pygame as pg
import pytest

from commentary.service import Commentary
from core.interfaces import GameStatus
from core.snake_rules import Rules
from viz.render_iface import Hud
from viz.renderer_headless import HeadlessRenderer, to_text
from viz.renderer_pygame import PANEL_PX, PygameRenderer
import viz.renderer_colors as theme


def test_text_board(make_snap):
    snap = make_snap([(1, 1), (1, 2)], foods=[(3, 0)], n=10)
    rows = to_text(snap).splitlines()
    assert len(rows) == 10 and all(len(r) == 10 for r in rows)
    assert rows[0][3] == "*"
    assert rows[1][1] == "H"
    assert rows[2][1] == "o"


def test_headless_renderer_counts_frames(cfg, make_snap):
    r = HeadlessRenderer()
    r.open(cfg)
    r.draw(make_snap([(1, 1)], n=10))
    assert r.frames == 1
    assert "H" in r.last_frame


@pytest.fixture
def attached(cfg):
    ren = PygameRenderer()
    surf = pg.Surface((cfg.grid_size * cfg.render_cell, cfg.grid_size * cfg.render_cell + PANEL_PX))
    ren.attach_surface(surf, cfg)
    return ren, surf


def test_draw_paints_head(cfg, attached):
    ren, surf = attached
    snap = Rules(cfg).reset()
    ren.draw(snap, Hud(high_score=3, autopilot=True,
                       commentary=Commentary("Nice.", "advice")))
    c = cfg.render_cell
    hx, hy = snap.head
    assert tuple(surf.get_at((hx * c + c // 2, hy * c + c // 2)))[:3] == theme.HEAD


def test_draw_shades_board_when_not_playing(cfg, attached):
    ren, surf = attached
    rules = Rules(cfg)
    rules.reset()
    snap = rules.to_idle()
    assert snap.status is GameStatus.IDLE
    ren.draw(snap)
    c = cfg.render_cell
    hx, hy = snap.head
    assert tuple(surf.get_at((hx * c + c // 2, hy * c + c // 2)))[:3] != theme.HEAD


def test_draw_before_open_raises(make_snap):
    with pytest.raises(RuntimeError):
        PygameRenderer().draw(make_snap([(1, 1)]))


def test_open_rejects_config_class():
    from config import AppConfig
    with pytest.raises(TypeError):
        PygameRenderer().open(AppConfig)


def test_scoreboard_tracks_episode_and_best(make_snap):
    from viz.live_viewer import Scoreboard
    board = Scoreboard()
    board.on_episode((3, 7))
    snap = make_snap([(1, 1)], n=10)
    hud = board.hud(snap)
    assert hud.autopilot
    assert hud.high_score == 7
    assert hud.overlay == "Episode 3"
    board.paused = True
    assert "paused" in board.hud(snap).overlay


def test_scoreboard_best_includes_running_score(make_snap):
    from dataclasses import replace
    from viz.live_viewer import Scoreboard
    board = Scoreboard(episode=1, best=2)
    snap = replace(make_snap([(1, 1)], n=10), score=9)
    assert board.hud(snap).high_score == 9
