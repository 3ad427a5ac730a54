"""
Example goals and tasks shown on first run so the UI is never empty.
"""
import copy
from typing import Any, Dict, List

from compass.models import Goal, Task, goal_from_dict, task_from_dict

DEFAULT_GOALS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "title": "Become an engineer who works globally",
        "description": "Sharpen technical skills and grow into an engineer who collaborates with people worldwide",
        "level": 1,
        "startDate": "2025-01-01",
        "endDate": "2035-01-01",
        "progress": 25,
        "status": "active",
        "type": "vision",
    },
    {
        "id": "2",
        "title": "Take an overseas assignment within 3 years",
        "description": "Work abroad as the lead of a global project",
        "level": 2,
        "parentId": "1",
        "startDate": "2025-01-01",
        "endDate": "2028-01-01",
        "progress": 40,
        "status": "active",
        "type": "long-term",
    },
    {
        "id": "3",
        "title": "Score 900 on TOEIC within a year",
        "description": "Build business English for international communication",
        "level": 3,
        "parentId": "2",
        "startDate": "2025-01-01",
        "endDate": "2026-01-01",
        "progress": 60,
        "status": "active",
        "type": "mid-term",
    },
]

DEFAULT_TASKS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "title": "Memorise 50 English words",
        "description": "Learn high-frequency TOEIC vocabulary",
        "goalId": "3",
        "dueDate": "2025-01-29",
        "dueTime": "09:00",
        "estimatedDuration": 30,
        "timeGranularity": "daily",
        "priority": "high",
        "status": "pending",
        "scheduledStart": "2025-01-29T08:30:00",
        "scheduledEnd": "2025-01-29T09:00:00",
        "visionConnection": {
            "coreVisionRelevance": "Stronger international communication",
            "valueAlignment": ["growth", "contribution"],
            "impactScore": 7.5,
            "whyStatement": "Communicating in English is a must for an engineer working globally",
        },
    },
    {
        "id": "2",
        "title": "30 minutes of listening practice",
        "description": "Work through TOEIC Part 3 and 4 questions",
        "goalId": "3",
        "dueDate": "2025-01-29",
        "dueTime": "19:00",
        "estimatedDuration": 30,
        "timeGranularity": "daily",
        "priority": "high",
        "status": "pending",
        "scheduledStart": "2025-01-29T18:30:00",
        "scheduledEnd": "2025-01-29T19:00:00",
        "visionConnection": {
            "coreVisionRelevance": "Stronger international communication",
            "valueAlignment": ["growth"],
            "impactScore": 6.8,
            "whyStatement": "Gathering information in English keeps up with the latest tech trends",
        },
    },
    {
        "id": "3",
        "title": "One hour of programming study",
        "description": "Learn the new React.js features",
        "goalId": "2",
        "dueDate": "2025-01-29",
        "dueTime": "20:00",
        "estimatedDuration": 60,
        "timeGranularity": "daily",
        "priority": "medium",
        "status": "pending",
        "scheduledStart": "2025-01-29T20:00:00",
        "scheduledEnd": "2025-01-29T21:00:00",
        "visionConnection": {
            "coreVisionRelevance": "Deliver innovative solutions",
            "valueAlignment": ["growth", "creativity"],
            "impactScore": 8.2,
            "whyStatement": "New technology makes for more efficient and innovative solutions",
        },
    },
    {
        "id": "4",
        "title": "Write a tech blog post",
        "description": "Summarise what I learned about React Hooks this week",
        "goalId": "2",
        "dueDate": "2025-01-29",
        "dueTime": "21:30",
        "estimatedDuration": 45,
        "timeGranularity": "daily",
        "priority": "medium",
        "status": "pending",
        "scheduledStart": "2025-01-29T21:30:00",
        "scheduledEnd": "2025-01-29T22:15:00",
        "visionConnection": {
            "coreVisionRelevance": "Contribute by sharing knowledge",
            "valueAlignment": ["contribution", "growth"],
            "impactScore": 6.5,
            "whyStatement": "Sharing what I learn supports other engineers' growth",
        },
    },
    {
        "id": "5",
        "title": "Dinner with the family",
        "description": "Share the day and make time for family",
        "goalId": "1",
        "dueDate": "2025-01-29",
        "dueTime": "18:00",
        "estimatedDuration": 60,
        "timeGranularity": "daily",
        "priority": "high",
        "status": "pending",
        "scheduledStart": "2025-01-29T18:00:00",
        "scheduledEnd": "2025-01-29T19:00:00",
        "visionConnection": {
            "coreVisionRelevance": "A lifestyle that values family time",
            "valueAlignment": ["family", "autonomy"],
            "impactScore": 9.1,
            "whyStatement": "Balance work and life and deepen the bond with the people who matter",
        },
    },
]


def default_goals() -> List[Goal]:
    return [goal_from_dict(copy.deepcopy(d)) for d in DEFAULT_GOALS]


def default_tasks() -> List[Task]:
    return [task_from_dict(copy.deepcopy(d)) for d in DEFAULT_TASKS]
