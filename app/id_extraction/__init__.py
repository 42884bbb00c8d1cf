"""
Identity Document Extraction Backend Application.

A FastAPI service that extracts structured data from passports, driving
licences and ID cards using a multimodal AI model.
"""

__version__ = "1.0.0"
