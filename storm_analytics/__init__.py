"""Storm Analytics — severe-weather event categorization and impact statistics."""

__version__ = "1.0.0"
