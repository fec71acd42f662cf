"""PracticeBoard HTTP API."""
