"""
Default system settings seeded for every new organization.
"""

from typing import Any

DEFAULT_REVIEW_SETTINGS: dict[str, Any] = {
    "defaultCycleType": "QUARTERLY",
    "competencies": [
        {"name": "Communication", "description": "Effectively shares information and ideas"},
        {"name": "Collaboration", "description": "Works well with others to achieve goals"},
        {"name": "Problem Solving", "description": "Identifies issues and develops solutions"},
        {"name": "Initiative", "description": "Takes proactive action without being asked"},
        {"name": "Adaptability", "description": "Adjusts effectively to changing conditions"},
    ],
    "selfReflectionQuestions": [
        "What accomplishments are you most proud of this period?",
        "What challenges did you face and how did you overcome them?",
        "What areas would you like to develop?",
    ],
}

DEFAULT_NOTIFICATION_SETTINGS: dict[str, Any] = {
    "emailNotifications": True,
    "reviewReminders": True,
    "goalReminders": True,
}

DEFAULT_FEATURE_SETTINGS: dict[str, Any] = {
    "goalsEnabled": True,
    "oneOnOnesEnabled": True,
    "developmentPlansEnabled": True,
    "peerFeedbackEnabled": True,
}

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "review": DEFAULT_REVIEW_SETTINGS,
    "notifications": DEFAULT_NOTIFICATION_SETTINGS,
    "features": DEFAULT_FEATURE_SETTINGS,
}
