"""Flask JSON API for fleet service reminders."""
