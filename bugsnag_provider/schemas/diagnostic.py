from enum import Enum
from typing import List

from pydantic import BaseModel


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """
    面向用户的诊断信息

    声明式引擎会把 summary 作为标题展示，detail 作为正文展示。
    """

    severity: Severity = Severity.ERROR
    summary: str
    detail: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


def has_error(diags: List[Diagnostic]) -> bool:
    """诊断列表中是否包含 error 级别的条目"""
    return any(d.is_error for d in diags)


def warning(summary: str, detail: str = "") -> Diagnostic:
    return Diagnostic(severity=Severity.WARNING, summary=summary, detail=detail)
