"""EduTrack SIS: student information system API."""

__version__ = "0.1.0"
