"""PracticeBoard - practice-management dashboard backed by a FHIR EHR."""

__version__ = "0.1.0"

__all__ = ["__version__"]
