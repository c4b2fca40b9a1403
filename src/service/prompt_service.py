"""기본 프롬프트와 추천 프롬프트 템플릿."""

import random

DEFAULT_IMAGE_PROMPT = (
    "Create a heartfelt, photorealistic image of these two people warmly embracing "
    "each other in a tender hug, showing genuine affection and connection. "
    "Natural lighting, emotional scene."
)

DEFAULT_VIDEO_PROMPT = (
    "Two people warmly embracing each other in a heartfelt hug, showing genuine "
    "affection and connection. Cinematic lighting, emotional scene, high quality video."
)

PROMPT_TEMPLATES = [
    "Two close friends reuniting after a long time apart, sharing a warm and emotional "
    "embrace in a beautiful outdoor setting with natural lighting",
    "A heartfelt moment as two loved ones hug each other tightly, surrounded by a soft, "
    "dreamy atmosphere with bokeh effects and golden hour lighting",
    "Two people coming together in a tender, meaningful hug, with genuine emotion and "
    "connection visible in their body language, cinematic style",
    "An emotional reunion scene where two individuals embrace warmly, tears of joy, "
    "heartwarming moment, professional photography style",
    "Two friends sharing a genuine, wholesome hug filled with love and appreciation, "
    "soft natural light, candid photography aesthetic",
    "A touching embrace between two people in an elegant setting, showing deep "
    "connection and affection, artistic cinematography",
]


def resolve_prompt(prompt: str | None, default: str) -> str:
    """빈 문자열/공백도 미입력으로 본다."""
    if prompt and prompt.strip():
        return prompt.strip()
    return default


def suggest_prompt(rng: random.Random | None = None) -> str:
    return (rng or random).choice(PROMPT_TEMPLATES)
