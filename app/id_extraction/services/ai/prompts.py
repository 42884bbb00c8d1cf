"""
Prompts for identity document extraction.

The image and PDF prompts differ only in how they name the input; both ask
for the same JSON object so the reply is parsed the same way.
"""

from enum import Enum

from .payload import PDF_EXTENSION


class ContentKind(str, Enum):
    """What the model is looking at, decided from the file extension."""

    IMAGE = "image"
    PDF = "pdf"


EXTRACTION_SYSTEM_PROMPT = """You are an expert in identity document verification.
You read passports, driving licences and national ID cards and transcribe what is printed on them.

## Rules:
1. Respond with a single JSON object and nothing else.
2. Only report information that is visible on the document. If a field is missing or unreadable, use null. DO NOT GUESS.
3. Keep dates and numbers exactly as printed.
4. Put anything useful that has no dedicated field (place of birth, place of issue, machine readable zone, licence categories) in additionalInfo."""


RESPONSE_SHAPE = """{
  "documentType": "passport" | "driving_license" | "id_card" | "other",
  "personalInfo": {
    "name": "",
    "dateOfBirth": "",
    "address": "",
    "nationality": "",
    "gender": ""
  },
  "documentNumber": "",
  "issueDate": "",
  "expiryDate": "",
  "issuingAuthority": "",
  "country": "",
  "additionalInfo": {}
}"""


_SUBJECT = {
    ContentKind.IMAGE: "identity document image",
    ContentKind.PDF: "identity document PDF",
}


def content_kind_for(extension: str) -> ContentKind:
    """Classify a file by extension alone."""
    if extension.lstrip(".").lower() == PDF_EXTENSION:
        return ContentKind.PDF
    return ContentKind.IMAGE


def build_prompt(kind: ContentKind) -> str:
    """
    Build the extraction instruction for ``kind``.

    Pure: the same kind always yields the same text.
    """
    subject = _SUBJECT[kind]
    return f"""Analyze this {subject} and extract the following information:
1. Document type (passport, driving_license, id_card or other)
2. All visible personal information (name, date of birth, address, nationality, gender)
3. Document number
4. Issue date and expiry date (if visible)
5. Issuing authority and country
6. Any other relevant details

Format the response as a JSON object with exactly these keys:
{RESPONSE_SHAPE}"""
