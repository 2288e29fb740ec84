from __future__ import annotations

import random


DEFAULT_WORDS_ZH = [
    "西瓜", "貓", "狗", "飛機", "蘋果", "香蕉", "車子", "太陽", "月亮",
    "星星", "花", "樹", "房子", "雨傘", "書", "筆", "電腦", "手機",
    "蛋糕", "冰淇淋", "球", "魚", "鳥", "兔子", "熊", "老虎", "獅子",
]


def pick_word(words: list[str], rng: random.Random | None = None) -> str:
    """Uniform draw with replacement; the same word may come up twice in a game."""
    if not words:
        raise ValueError("word bank is empty")
    return (rng or random).choice(words)


def normalize_guess(text: str) -> str:
    return text.strip().casefold()
