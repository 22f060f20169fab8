"""
Bugsnag Provider 异常体系

API 层（BugsnagClient / ProjectAPI）抛出这些异常；
资源层、数据源层和 Provider 层捕获后转换为 Diagnostic 返回给声明式引擎。
所有异常都不会触发重试。
"""

from typing import Any, Optional

from bugsnag_provider.schemas.diagnostic import Diagnostic, Severity

API_DOCS_URL = "https://bugsnagapiv2.docs.apiary.io"
RATE_LIMIT_DOCS_URL = f"{API_DOCS_URL}/#introduction/rate-limiting"
LIST_PROJECTS_DOCS_URL = (
    f"{API_DOCS_URL}/#reference/projects/projects/list-an-organization's-projects"
)
PROJECT_DOCS_URL = (
    f"{API_DOCS_URL}/#reference/projects/projects/create-a-project-in-an-organization"
)
AUTH_DOCS_URL = f"{API_DOCS_URL}/#introduction/authentication"
ORGANIZATIONS_DOCS_URL = (
    f"{API_DOCS_URL}/#reference/current-user/organizations/"
    "list-the-current-user's-organizations"
)


class BugsnagError(Exception):
    """Base exception for all provider errors."""

    severity = Severity.ERROR
    summary = "bugsnag error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.summary)

    @property
    def detail(self) -> str:
        return str(self)

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            severity=self.severity, summary=self.summary, detail=self.detail
        )


class TransportError(BugsnagError):
    """请求构造失败或网络错误（含超时）"""

    summary = "request to Bugsnag failed"


class RateLimited(BugsnagError):
    summary = "rate limit reached"

    def __init__(self, message: str = ""):
        super().__init__(
            message
            or "You have reached the rate limit, please try again later.\n"
            f"For further, see {RATE_LIMIT_DOCS_URL}."
        )


class UnexpectedStatus(BugsnagError):
    """非 2xx 且非 429 的响应，携带原始响应体用于排查"""

    summary = "unexpected error"

    def __init__(self, status_code: int, body: str, doc_url: str = API_DOCS_URL):
        self.status_code = status_code
        self.body = body
        self.doc_url = doc_url
        super().__init__(
            "You have encountered an unexpected error.\n"
            f"Please see {doc_url} for further information\n"
            f"status code: {status_code}\n"
            f"error message: {body}"
        )


class DecodeError(BugsnagError):
    """2xx 响应体无法解析为预期结构"""

    summary = "unable to decode Bugsnag response"

    def __init__(self, reason: Any, body: str):
        self.body = body
        super().__init__(f"error message: {reason}\nreceived response body: {body}")


class MissingIdentifier(BugsnagError):
    summary = "no project ID retrieved"

    def __init__(self, body: Any):
        self.body = body
        super().__init__(f"no project ID was retrieved.\nreceived response body: {body}")


class DuplicateName(BugsnagError):
    summary = "project already exists"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"the project {name} already exists!")


class NotFound(BugsnagError):
    summary = "unable to find projects with the provided name"

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Unable to find the project with the name {name}.\n"
            "Please make sure that the project exists (or check your spelling) "
            "and try again."
        )


class FieldAssignmentError(BugsnagError):
    summary = "error reading project state"

    def __init__(
        self, field: str, underlying: Exception, record: Optional[dict] = None
    ):
        self.field = field
        self.underlying = underlying
        self.record = record
        super().__init__(
            f"error message: field {field!r}: {underlying}\nproject: {record}"
        )


class ConfigurationError(BugsnagError):
    """Provider 配置缺失（token 或 organization id）"""

    def __init__(self, summary: str, detail: str):
        self.summary = summary
        super().__init__(detail)


class AuthenticationFailed(BugsnagError):
    summary = "Unable to authenticate to Bugsnag"

    def __init__(self, host_url: str):
        self.host_url = host_url
        super().__init__(
            f"Unable to authenticate to Bugsnag API ({host_url}) with the provided "
            "API token.\nPlease check that your token is valid and try again."
        )
