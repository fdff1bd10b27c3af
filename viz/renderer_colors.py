# viz/renderer_colors.py
BG = (15, 23, 42)
GRID = (30, 41, 59)
PANEL = (2, 6, 23)
HEAD = (34, 211, 238)
BODY = (21, 148, 168)
FOOD = (168, 85, 247)
TEXT = (226, 232, 240)
MUTED = (100, 116, 139)
AUTOPILOT = (34, 211, 238)
HIGH = (192, 132, 252)

STATUS = {
    "IDLE": (56, 189, 248),
    "PAUSED": (250, 204, 21),
    "GAME_OVER": (239, 68, 68),
    "WON": (52, 211, 153),
    "STALLED": (251, 146, 60),
}

COMMENTARY = {
    "congratulations": (52, 211, 153),
    "sarcasm": (248, 113, 113),
    "advice": (96, 165, 250),
    "encouragement": (34, 211, 238),
}
