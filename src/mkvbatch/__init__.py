"""mkvbatch: batch track selection and remuxing for Matroska files."""

__version__ = "0.1.0"
