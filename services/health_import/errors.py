"""
Errors raised by the health export import engine.

Every failure the engine reports is a HealthImportError subclass with a
stable machine-readable ``code`` and a message fit to show to the athlete.
Field-level problems (an unparseable number, an unparseable date) are never
raised; they degrade to a skipped field, an explicit null or the fallback
timestamp.
"""


class HealthImportError(ValueError):
    """Base class for import failures. No partial result accompanies it."""

    code = "import_failed"
    default_message = "Unable to parse health export."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class EmptyPayloadError(HealthImportError):
    code = "empty_payload"
    default_message = "Paste JSON exported from your iPhone first."


class InvalidJSONError(HealthImportError):
    code = "invalid_json"
    default_message = "Import payload must be valid JSON."


class NoRecordsFoundError(HealthImportError):
    code = "no_records"
    default_message = "No records found. Export data should include JSON arrays or sample objects."


class NoNumericSamplesError(HealthImportError):
    code = "no_numeric_samples"
    default_message = "No numeric samples were found in this export."


class EmptyExportFileError(HealthImportError):
    code = "empty_file"
    default_message = "Selected file is empty."
