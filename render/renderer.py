# render/renderer.py
import pygame, logging
from typing import Optional
from config import RenderConfig
from keys.layout import KeyboardLayout

BTN_PAD_X = 12
BTN_GAP = 10
BUTTONS = ["OPEN CLIP", "DEFAULT TONE", "QUIT"]

def keyboard_geometry(layout: KeyboardLayout, x0: float, y0: float, width: float, height: float):
    """key_id -> (x, y, w, h, is_black)；黑鍵放在左邊白鍵的 0.7 處，寬 0.6。"""
    whites = layout.white_keys()
    white_w = float(width) / max(1, len(whites))
    geo = {}
    idx = 0
    for k in layout:
        if not k.is_black:
            geo[k.key_id] = (x0 + idx * white_w, y0, white_w - 1, float(height), False)
            idx += 1
        else:
            base_x = x0 + max(0, idx - 1) * white_w
            geo[k.key_id] = (base_x + white_w * 0.7, y0, white_w * 0.6, height * 0.6, True)
    return geo

def hit_test(geo: dict, pos) -> Optional[int]:
    mx, my = pos
    # 黑鍵蓋在白鍵上面，先判斷
    for want_black in (True, False):
        for key_id, (x, y, w, h, is_black) in geo.items():
            if is_black == want_black and x <= mx < x + w and y <= my < y + h:
                return key_id
    return None

class Renderer:
    def __init__(self, cfg: RenderConfig, layout: KeyboardLayout):
        pygame.init()
        self.cfg = cfg
        self.layout = layout
        self.screen = pygame.display.set_mode((cfg.window_w, cfg.window_h))
        pygame.display.set_caption("Soundbite Piano")
        self.font = pygame.font.SysFont("consolas", 18)
        self.font_small = pygame.font.SysFont("consolas", 14)
        self.clock = pygame.time.Clock()
        self.button_rects = {}
        self.geo = {}
        self._rebuild_layout()

    def _rebuild_layout(self):
        m = self.cfg.piano_margin
        top = self.cfg.status_h + 70
        self.geo = keyboard_geometry(self.layout, m, top,
                                     self.cfg.window_w - 2 * m, self.cfg.window_h - top - m)
        logging.debug("Keyboard layout rebuilt: range=[%d,%d], keys=%d",
                      self.layout.first, self.layout.last, len(self.layout))

    def tick(self, fps=60) -> float:
        return self.clock.tick(fps) / 1000.0

    def begin_frame(self):
        self.screen.fill((12, 12, 14))

    def end_frame(self):
        pygame.display.flip()

    def key_at(self, pos) -> Optional[int]:
        return hit_test(self.geo, pos)

    def draw_status_bar(self, clip_name: str = "", status: str = "", hint: str = ""):
        sh = self.cfg.status_h
        pygame.draw.rect(self.screen, (24, 24, 28), (0, 0, self.cfg.window_w, sh))
        pygame.draw.line(self.screen, (60, 60, 66), (0, sh), (self.cfg.window_w, sh), 1)

        x = 10; self.button_rects.clear()
        for label in BUTTONS:
            surf = self.font_small.render(label, True, (220, 220, 230))
            rect = surf.get_rect(); rect.topleft = (x + BTN_PAD_X, (sh - rect.height)//2)
            box = pygame.Rect(x, 4, rect.width + BTN_PAD_X*2, sh - 8)
            pygame.draw.rect(self.screen, (40, 40, 46), box, border_radius=6)
            pygame.draw.rect(self.screen, (75, 75, 85), box, 1, border_radius=6)
            self.screen.blit(surf, rect)
            self.button_rects[label] = box
            x += box.width + BTN_GAP

        if clip_name:
            surf = self.font_small.render(f"Current: {clip_name}", True, (180, 180, 190))
            self.screen.blit(surf, (x + 6, (sh - surf.get_height())//2))

        y = sh + 10
        if status:
            self.screen.blit(self.font.render(status, True, (140, 190, 255)), (10, y))
        if hint:
            self.screen.blit(self.font_small.render(hint, True, (230, 210, 90)), (10, y + 26))

    def button_at(self, pos) -> Optional[str]:
        for label, rect in self.button_rects.items():
            if rect.collidepoint(pos):
                return label
        return None

    # ------- piano -------
    def draw_keyboard(self, highlight: set[int] | None = None):
        highlight = highlight or set()
        for want_black in (False, True):
            for k in self.layout:
                if k.is_black != want_black:
                    continue
                x, y, w, h, is_black = self.geo[k.key_id]
                lit = k.key_id in highlight
                if is_black:
                    fill = (18, 18, 20) if not lit else (255, 200, 120)
                    text_col = (230, 230, 230)
                else:
                    fill = (230, 230, 230) if not lit else (255, 240, 170)
                    text_col = (40, 40, 46)
                pygame.draw.rect(self.screen, fill, (x, y, w, h))
                pygame.draw.rect(self.screen, (60, 60, 66), (x, y, w, h), 1)
                label = self.font_small.render(k.name, True, text_col)
                self.screen.blit(label, (x + (w - label.get_width()) / 2, y + h - label.get_height() - 6))
