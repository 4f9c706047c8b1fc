"""
Format tables: extensions, MIME types, OCR languages and compression tiers.
"""

from dataclasses import dataclass

from docverse.models.conversion import CompressionQuality, OfficeFormat

PDF_MIME = "application/pdf"
ZIP_MIME = "application/zip"

OFFICE_MIME = {
    OfficeFormat.WORD: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    OfficeFormat.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    OfficeFormat.POWERPOINT: "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}

OFFICE_EXTENSION = {
    OfficeFormat.WORD: "docx",
    OfficeFormat.EXCEL: "xlsx",
    OfficeFormat.POWERPOINT: "pptx",
}

# Extensions accepted as input for office -> PDF
OFFICE_INPUT_EXTENSIONS = {
    OfficeFormat.WORD: {"doc", "docx", "odt", "rtf"},
    OfficeFormat.EXCEL: {"xls", "xlsx", "ods", "csv"},
    OfficeFormat.POWERPOINT: {"ppt", "pptx", "odp"},
}

DEFAULT_OFFICE_FILENAME = {
    OfficeFormat.WORD: "document.docx",
    OfficeFormat.EXCEL: "spreadsheet.xlsx",
    OfficeFormat.POWERPOINT: "presentation.pptx",
}

# Media types the cloud API accepts for createpdf uploads
CLOUD_UPLOAD_MIME = {
    "doc": "application/msword",
    "docx": OFFICE_MIME[OfficeFormat.WORD],
    "rtf": "application/rtf",
    "odt": "application/vnd.oasis.opendocument.text",
    "xls": "application/vnd.ms-excel",
    "xlsx": OFFICE_MIME[OfficeFormat.EXCEL],
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "csv": "text/csv",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": OFFICE_MIME[OfficeFormat.POWERPOINT],
    "odp": "application/vnd.oasis.opendocument.presentation",
    "pdf": PDF_MIME,
}

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "tif", "tiff", "bmp", "webp"}

# UI language code -> Tesseract traineddata name
TESSERACT_LANGUAGES = {
    "en": "eng",
    "es": "spa",
    "fr": "fra",
    "de": "deu",
    "it": "ita",
    "pt": "por",
    "zh": "chi_sim",
    "ja": "jpn",
    "ko": "kor",
    "ar": "ara",
}

# UI language code -> cloud OCR locale
CLOUD_OCR_LOCALES = {
    "en": "en-US",
    "es": "es-ES",
    "fr": "fr-FR",
    "de": "de-DE",
    "it": "it-IT",
    "pt": "pt-BR",
    "zh": "zh-CN",
    "ja": "ja-JP",
    "ko": "ko-KR",
    "ar": "ar-SA",
}

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class CompressionProfile:
    pdf_settings: str
    dpi: int
    cloud_level: str


COMPRESSION_PROFILES = {
    CompressionQuality.LOW: CompressionProfile("/screen", 72, "HIGH"),
    CompressionQuality.MEDIUM: CompressionProfile("/ebook", 150, "MEDIUM"),
    CompressionQuality.HIGH: CompressionProfile("/printer", 300, "LOW"),
}

MIN_DPI = 36
MAX_DPI = 600


def tesseract_language(ui_language: str) -> str:
    return TESSERACT_LANGUAGES.get(ui_language, TESSERACT_LANGUAGES[DEFAULT_LANGUAGE])


def cloud_ocr_locale(ui_language: str) -> str:
    return CLOUD_OCR_LOCALES.get(ui_language, CLOUD_OCR_LOCALES[DEFAULT_LANGUAGE])


def cloud_upload_mime(extension: str) -> str:
    # Unknown office extensions upload as DOCX, matching the word default.
    return CLOUD_UPLOAD_MIME.get(extension, OFFICE_MIME[OfficeFormat.WORD])
