from __future__ import annotations


class ValidationError(ValueError):
    pass


class CsvFormatError(ValueError):
    pass


class NotFoundError(LookupError):
    pass
