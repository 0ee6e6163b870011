"""taskflow: sectioned task, recurring-task and learning tracker."""

__version__ = "0.1.0"
