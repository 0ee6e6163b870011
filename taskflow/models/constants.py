"""Constants for taskflow.

This module centralizes section metadata and default values used throughout the application.
"""

from taskflow.models.section import SectionId


SECTION_NAMES = {
    SectionId.HOUSEHOLD: "Household Work",
    SectionId.PERSONAL: "Personal Development",
    SectionId.OFFICIAL: "Official Work",
    SectionId.BLOG: "Blog & Learning",
}

SECTION_COLORS = {
    SectionId.HOUSEHOLD: "green",
    SectionId.PERSONAL: "blue",
    SectionId.OFFICIAL: "purple",
    SectionId.BLOG: "orange",
}

# Shorter names used in notification titles
NOTIFICATION_SECTION_NAMES = {
    SectionId.HOUSEHOLD: "Household",
    SectionId.PERSONAL: "Personal Development",
    SectionId.OFFICIAL: "Official Work",
    SectionId.BLOG: "Blog",
}

DEFAULT_CATEGORIES = {
    SectionId.HOUSEHOLD: ["Cleaning", "Maintenance", "Shopping", "Cooking"],
    SectionId.PERSONAL: ["Learning", "Exercise", "Reading", "Class", "Skill Building"],
    SectionId.OFFICIAL: ["Meetings", "Projects", "Reports", "Planning", "Communication"],
    SectionId.BLOG: ["Writing", "Research", "Editing", "Publishing", "Marketing"],
}

# Recurrence
DEFAULT_RECURRENCE_VALUE = 1

# Notifications
NOTIFICATION_PREVIEW_LIMIT = 3  # Items listed in a notification body before "...and N more"
DEFAULT_STATUS_SWEEP_MINUTES = 60
