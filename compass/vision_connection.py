"""
Rule table that links a task to the user's vision.

The first keyword found in "<title> <description>" (case-insensitive,
table order) decides the connection; nothing matching yields the default.
"""
import copy
from typing import Dict, List, Tuple

from compass.models import VisionConnection

KEYWORD_CONNECTIONS: List[Tuple[Tuple[str, ...], Dict]] = [
    (
        ("english", "英語"),
        {
            "core_vision_relevance": "Stronger international communication",
            "value_alignment": ["growth", "contribution"],
            "impact_score": 7.0,
            "why_statement": "Communicating in English is a must for an engineer working globally",
        },
    ),
    (
        ("programming", "coding", "プログラミング"),
        {
            "core_vision_relevance": "Deliver innovative solutions",
            "value_alignment": ["growth", "creativity"],
            "impact_score": 8.0,
            "why_statement": "New technology makes for more efficient and innovative solutions",
        },
    ),
    (
        ("exercise", "workout", "運動"),
        {
            "core_vision_relevance": "A healthy, sustainable lifestyle",
            "value_alignment": ["autonomy", "family"],
            "impact_score": 6.5,
            "why_statement": "A healthy body and mind is the base for living the ideal for the long run",
        },
    ),
    (
        ("family", "家族"),
        {
            "core_vision_relevance": "A lifestyle that values family time",
            "value_alignment": ["family", "autonomy"],
            "impact_score": 9.0,
            "why_statement": "Balance work and life and deepen the bond with the people who matter",
        },
    ),
    (
        ("study", "learn", "学習"),
        {
            "core_vision_relevance": "Continuous growth and self-realisation",
            "value_alignment": ["growth"],
            "impact_score": 7.5,
            "why_statement": "New knowledge and skills bring you closer to your ideal self",
        },
    ),
    (
        ("reading", "book", "読書"),
        {
            "core_vision_relevance": "Knowledge and insight",
            "value_alignment": ["growth", "creativity"],
            "impact_score": 6.8,
            "why_statement": "Broad perspectives lead to better judgement and creative solutions",
        },
    ),
]

DEFAULT_CONNECTION = {
    "core_vision_relevance": "Daily steps toward the ideal",
    "value_alignment": ["growth"],
    "impact_score": 5.0,
    "why_statement": "Every small step is real progress toward the future you want",
}


def generate_vision_connection(title: str, description: str = "") -> VisionConnection:
    text = f"{title or ''} {description or ''}".lower()
    for keywords, connection in KEYWORD_CONNECTIONS:
        if any(keyword.lower() in text for keyword in keywords):
            return VisionConnection(**copy.deepcopy(connection))
    return VisionConnection(**copy.deepcopy(DEFAULT_CONNECTION))
