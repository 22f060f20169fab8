"""
只读数据源

- bugsnag_projects: 列出组织下的全部项目
- bugsnag_project: 按名称查找单个项目

数据源的 id 由当前时间戳生成，仅用于满足引擎“每次读取都要有 id”的要求，
不是 Bugsnag 的项目 id。
"""

import logging
import time
from typing import List

from bugsnag_provider.core.errors import (
    BugsnagError,
    FieldAssignmentError,
    NotFound,
)
from bugsnag_provider.core.resource_data import ResourceData
from bugsnag_provider.providers.bugsnag.api import ProjectAPI
from bugsnag_provider.schemas.diagnostic import Diagnostic
from bugsnag_provider.schemas.fields import (
    FieldSchema,
    FieldType,
    Schema,
    project_schema,
)

logger = logging.getLogger(__name__)


def _timestamp_id() -> str:
    return str(int(time.time()))


def projects_schema() -> Schema:
    item_schema = project_schema(
        name_required=False,
        type_required=False,
        ignore_old_browsers_required=False,
    )
    return {
        "projects": FieldSchema(
            type=FieldType.LIST,
            computed=True,
            elem=item_schema,
            description="All projects of the organization.",
        )
    }


def project_lookup_schema() -> Schema:
    """按名称查找：name 必填，其余字段均为计算值"""
    return project_schema(
        name_required=True,
        type_required=False,
        ignore_old_browsers_required=False,
    )


class ProjectsDataSource:
    type_name = "bugsnag_projects"

    def __init__(self, api: ProjectAPI):
        self.api = api

    @property
    def schema(self) -> Schema:
        return projects_schema()

    async def read(self, data: ResourceData) -> List[Diagnostic]:
        try:
            projects = await self.api.list_projects()
        except BugsnagError as e:
            logger.error("Failed to list projects: %s", e.summary)
            return [e.to_diagnostic()]

        try:
            data.set("projects", [project.to_state() for project in projects])
        except (KeyError, TypeError) as e:
            return [FieldAssignmentError("projects", e).to_diagnostic()]

        data.set_id(_timestamp_id())
        return []


class ProjectDataSource:
    type_name = "bugsnag_project"

    def __init__(self, api: ProjectAPI):
        self.api = api

    @property
    def schema(self) -> Schema:
        return project_lookup_schema()

    async def read(self, data: ResourceData) -> List[Diagnostic]:
        name = data.get("name")

        try:
            projects = await self.api.list_projects()
        except BugsnagError as e:
            logger.error("Failed to list projects: %s", e.summary)
            return [e.to_diagnostic()]

        match = next((project for project in projects if project.name == name), None)
        if match is None:
            logger.info("No project named %s", name)
            data.set_id("")
            return [NotFound(name).to_diagnostic()]

        record = match.to_state()
        for field in self.schema:
            try:
                data.set(field, record.get(field))
            except (KeyError, TypeError) as e:
                return [FieldAssignmentError(field, e, record).to_diagnostic()]

        data.set_id(_timestamp_id())
        return []
