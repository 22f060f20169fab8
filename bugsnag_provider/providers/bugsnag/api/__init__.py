"""
Bugsnag API 层 - 原子能力封装

使用示例:
    from bugsnag_provider.core.client import BugsnagClient
    from bugsnag_provider.providers.bugsnag.api import ProjectAPI

    api = ProjectAPI(BugsnagClient(api_token="...", organization_id="..."))
    projects = await api.list_projects()
"""

from .project import PAGE_SIZE, ProjectAPI

__all__ = [
    "PAGE_SIZE",
    "ProjectAPI",
]
