# ========================= input/keymap.py =========================
import json
import pygame
from typing import Dict

# 預設配置：A 排 + W 排，涵蓋 C4..C5 一個八度（可用 --keymap 覆蓋）
DEFAULT_KEYMAP: Dict[int, int] = {
    pygame.K_a: 60,  # C4
    pygame.K_w: 61,
    pygame.K_s: 62,
    pygame.K_e: 63,
    pygame.K_d: 64,
    pygame.K_f: 65,
    pygame.K_t: 66,
    pygame.K_g: 67,
    pygame.K_y: 68,
    pygame.K_h: 69,
    pygame.K_u: 70,
    pygame.K_j: 71,
    pygame.K_k: 72,  # C5
}

def keycode_to_name(k: int) -> str:
    try:
        return pygame.key.name(k)
    except Exception:
        return str(k)

def name_to_keycode(name: str) -> int:
    """把 'a', '1', 'comma' 等名稱轉回 pygame 的 keycode。"""
    try:
        return pygame.key.key_code(name)
    except (ValueError, pygame.error):
        # 允許純數字 keycode
        try:
            return int(name)
        except ValueError:
            raise ValueError(f"Unknown key name: {name}") from None

def serialize_keymap(kmap: Dict[int, int]) -> dict:
    """以 key 名稱輸出，便於人看與儲存 JSON。"""
    return {keycode_to_name(k): v for k, v in kmap.items()}

def deserialize_keymap(obj: dict) -> Dict[int, int]:
    """從名稱->key_id 的 JSON 還原為 keycode->key_id。"""
    if not isinstance(obj, dict):
        raise ValueError("keymap JSON must be an object of key name -> note number")
    out: Dict[int, int] = {}
    for kname, pitch in obj.items():
        out[name_to_keycode(str(kname))] = int(pitch)
    return out

def load_keymap(path: str) -> Dict[int, int]:
    with open(path, "r", encoding="utf-8") as f:
        return deserialize_keymap(json.load(f))
