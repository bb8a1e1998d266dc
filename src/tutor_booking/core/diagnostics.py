'''
Diagnostics channel for orchestrated operations.

Each operation receives a Diagnostics sink and reports failures and notable
outcomes into it. Every record is mirrored to the application logger.
'''
import logging
from typing import Optional

from pydantic import BaseModel

from ..common.logger import log


class DiagnosticRecord(BaseModel):
    level: str
    message: str
    detail: Optional[str] = None


class Diagnostics:
    """
    Collects DiagnosticRecords for one call (or one request).
    """
    def __init__(self, logger: logging.Logger = log):
        self.logger = logger
        self.records: list[DiagnosticRecord] = []

    def report(self, level: int, message: str, detail: object = None) -> DiagnosticRecord:
        record = DiagnosticRecord(
            level=logging.getLevelName(level),
            message=message,
            detail=None if detail is None else str(detail)
        )
        self.records.append(record)
        if record.detail is None:
            self.logger.log(level, message)
        else:
            self.logger.log(level, f"{message} {record.detail}")
        return record

    def info(self, message: str, detail: object = None) -> DiagnosticRecord:
        return self.report(logging.INFO, message, detail)

    def warning(self, message: str, detail: object = None) -> DiagnosticRecord:
        return self.report(logging.WARNING, message, detail)

    def error(self, message: str, detail: object = None) -> DiagnosticRecord:
        return self.report(logging.ERROR, message, detail)

    @property
    def errors(self) -> list[DiagnosticRecord]:
        return [r for r in self.records if r.level == "ERROR"]

    @property
    def warnings(self) -> list[DiagnosticRecord]:
        return [r for r in self.records if r.level == "WARNING"]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def messages(self) -> list[str]:
        return [r.message for r in self.records]
