from enum import Enum


class Mood(str, Enum):
    TERRIBLE = "terrible"
    BAD = "bad"
    NEUTRAL = "neutral"
    GOOD = "good"
    EXCELLENT = "excellent"


class ProjectStatus(str, Enum):
    IDEA = "idea"
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EventType(str, Enum):
    SEMINAR = "seminar"
    WORKSHOP = "workshop"
    COMPETITION = "competition"
    MEETUP = "meetup"
    CONFERENCE = "conference"


class MaterialType(str, Enum):
    PDF = "pdf"
    SLIDES = "slides"
    VIDEO = "video"
    NOTES = "notes"
    LINK = "link"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


MOOD_SCORES = {
    Mood.TERRIBLE: 1,
    Mood.BAD: 2,
    Mood.NEUTRAL: 3,
    Mood.GOOD: 4,
    Mood.EXCELLENT: 5,
}
MOOD_META = {
    Mood.TERRIBLE: {"label": "Terrible", "color": "#D95252"},
    Mood.BAD: {"label": "Bad", "color": "#E08A4C"},
    Mood.NEUTRAL: {"label": "Neutral", "color": "#B8B8B8"},
    Mood.GOOD: {"label": "Good", "color": "#3772A6"},
    Mood.EXCELLENT: {"label": "Excellent", "color": "#4CA66B"},
}

PROJECT_STATUS_META = {
    ProjectStatus.IDEA: {"label": "Idea", "color": "#9E9E9E"},
    ProjectStatus.PLANNING: {"label": "Planning", "color": "#3772A6"},
    ProjectStatus.IN_PROGRESS: {"label": "In Progress", "color": "#D6C24A"},
    ProjectStatus.ON_HOLD: {"label": "On Hold", "color": "#E08A4C"},
    ProjectStatus.COMPLETED: {"label": "Completed", "color": "#4CA66B"},
    ProjectStatus.CANCELLED: {"label": "Cancelled", "color": "#D95252"},
}
PROJECT_PRIORITY_META = {
    ProjectPriority.LOW: {"label": "Low", "color": "#9E9E9E"},
    ProjectPriority.MEDIUM: {"label": "Medium", "color": "#3772A6"},
    ProjectPriority.HIGH: {"label": "High", "color": "#E08A4C"},
    ProjectPriority.URGENT: {"label": "Urgent", "color": "#D95252"},
}
PROJECT_CATEGORIES = [
    "school",
    "competition",
    "personal",
    "client",
    "startup",
    "web",
    "iot",
    "ai",
    "mobile",
    "api",
]

EVENT_TYPE_META = {
    EventType.SEMINAR: {"label": "Seminar", "color": "#3772A6"},
    EventType.WORKSHOP: {"label": "Workshop", "color": "#4CA66B"},
    EventType.COMPETITION: {"label": "Competition", "color": "#8E79AF"},
    EventType.MEETUP: {"label": "Meetup", "color": "#E08A4C"},
    EventType.CONFERENCE: {"label": "Conference", "color": "#D95252"},
}
TASK_STATUS_META = {
    TaskStatus.TODO: {"label": "To do", "color": "#9E9E9E"},
    TaskStatus.IN_PROGRESS: {"label": "In Progress", "color": "#D6C24A"},
    TaskStatus.DONE: {"label": "Done", "color": "#4CA66B"},
}
MATERIAL_TYPE_LABELS = {
    MaterialType.PDF: "PDF Document",
    MaterialType.SLIDES: "Presentation Slides",
    MaterialType.VIDEO: "Video Recording",
    MaterialType.NOTES: "Notes",
    MaterialType.LINK: "Link/URL",
}

ROLE_OPTIONS = [
    "Friend",
    "Colleague",
    "Client",
    "Mentor",
    "Student",
    "Freelancer",
    "Business Partner",
    "Family",
    "Teacher",
    "Other",
]

CONTACT_CHANNELS = [
    ("instagram", "Instagram"),
    ("whatsapp", "WhatsApp"),
    ("linkedin", "LinkedIn"),
    ("github", "GitHub"),
    ("discord", "Discord"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("twitter", "Twitter"),
    ("telegram", "Telegram"),
    ("website", "Website"),
]
CONTACT_CHANNEL_KEYS = [key for key, _ in CONTACT_CHANNELS]

TIMELINE_OPTIONS = [
    ("all", "All Time"),
    ("today", "Today"),
    ("week", "This Week"),
    ("month", "This Month"),
    ("year", "This Year"),
]

PEOPLE_TABLE = "people"
PROJECTS_TABLE = "projects"
EVENTS_TABLE = "events"
EVENT_PEOPLE_TABLE = "event_people"
EVENT_MATERIALS_TABLE = "event_materials"
LOGS_TABLE = "daily_logs"
TASKS_TABLE = "tasks"
SKILLS_TABLE = "skills"

ENERGY_LEVELS = [1, 2, 3, 4, 5]
DEFAULT_ENERGY_LEVEL = 3

SKILL_LEVELS = [1, 2, 3, 4, 5]
DEFAULT_SKILL_LEVEL = 1
