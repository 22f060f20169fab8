"""
bugsnag_project 资源

生命周期: absent -> pending-create -> present -> (update-in-place) present -> absent

只有 Create 和 Read 会产生远端调用；Update 和 Delete 不修改远端，
并以 warning 诊断告知调用方。
"""

import logging
from typing import List

from bugsnag_provider.core.errors import (
    BugsnagError,
    DuplicateName,
    FieldAssignmentError,
)
from bugsnag_provider.core.resource_data import ResourceData
from bugsnag_provider.providers.bugsnag.api import ProjectAPI
from bugsnag_provider.schemas.diagnostic import Diagnostic, warning
from bugsnag_provider.schemas.fields import Schema, project_schema

logger = logging.getLogger(__name__)


def resource_schema() -> Schema:
    return project_schema(
        name_required=True, type_required=True, ignore_old_browsers_required=False
    )


def read_schema() -> Schema:
    """回读已有项目时写入本地的字段集合"""
    return project_schema(
        name_required=True, type_required=False, ignore_old_browsers_required=False
    )


class ProjectResource:
    type_name = "bugsnag_project"

    def __init__(self, api: ProjectAPI):
        self.api = api

    @property
    def schema(self) -> Schema:
        return resource_schema()

    async def create(self, data: ResourceData) -> List[Diagnostic]:
        """
        创建项目

        先列出组织下的项目做名称唯一性检查（远端不保证唯一），
        再创建，并立即回读以填充计算字段。
        """
        name = data.get("name")
        project_type = data.get("type")
        ignore_old_browsers = data.get("ignore_old_browsers")

        try:
            projects = await self.api.list_projects()
            if any(project.name == name for project in projects):
                logger.warning("Project already exists: name=%s", name)
                raise DuplicateName(name)

            project_id = await self.api.create_project(
                name, project_type, ignore_old_browsers
            )
        except BugsnagError as e:
            logger.error("Failed to create project %s: %s", name, e.summary)
            return [e.to_diagnostic()]

        data.set_id(project_id)
        return await self.read(data)

    async def read(self, data: ResourceData) -> List[Diagnostic]:
        project_id = data.id
        try:
            project = await self.api.get_project(project_id)
        except BugsnagError as e:
            logger.error("Failed to read project %s: %s", project_id, e.summary)
            return [e.to_diagnostic()]

        record = project.to_state()
        for field in read_schema():
            try:
                data.set(field, record.get(field))
            except (KeyError, TypeError) as e:
                logger.error("Failed to set field %s of project %s", field, project_id)
                return [FieldAssignmentError(field, e, record).to_diagnostic()]

        logger.debug("Project state refreshed: id=%s", project_id)
        return []

    async def update(self, data: ResourceData) -> List[Diagnostic]:
        logger.warning("Update of project %s was not sent to Bugsnag", data.id)
        return [
            warning(
                "project update not applied",
                f"Changes to project {data.id} were accepted but not sent to "
                "Bugsnag; updating projects is not supported yet.",
            )
        ]

    async def delete(self, data: ResourceData) -> List[Diagnostic]:
        project_id = data.id
        data.set_id("")
        logger.warning("Project %s removed from state only", project_id)
        return [
            warning(
                "project not deleted in Bugsnag",
                f"Project {project_id} is no longer managed, but it still exists "
                "in Bugsnag. Delete it from the Bugsnag dashboard if needed.",
            )
        ]
