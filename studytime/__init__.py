"""Study time tracking service."""
