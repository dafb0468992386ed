"""StudyFlow: tasks, habits, calendar, study chat and focus timer."""

__version__ = "0.1.0"
