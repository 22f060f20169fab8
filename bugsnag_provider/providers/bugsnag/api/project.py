"""
ProjectAPI - 项目原子接口封装

对应 Bugsnag Data Access API:
- 列出组织下的项目: GET /organizations/:org/projects?per_page=100
- 获取项目详情: GET /organizations/:org/projects/:id
- 创建项目: POST /organizations/:org/projects?name=&type=&ignore_old_browsers=
- 更新项目: PATCH /organizations/:org/projects?name=&type=&ignore_old_browsers=
"""

import logging
from typing import Any, AsyncIterator, List

from pydantic import ValidationError

from bugsnag_provider.core.client import BugsnagClient
from bugsnag_provider.core.errors import (
    LIST_PROJECTS_DOCS_URL,
    PROJECT_DOCS_URL,
    DecodeError,
    MissingIdentifier,
)
from bugsnag_provider.schemas.project import Project

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class ProjectAPI:
    """
    Bugsnag 项目 API 封装

    所有方法在失败时抛出 BugsnagError 子类，不做重试。
    """

    def __init__(self, client: BugsnagClient):
        self.client = client

    @staticmethod
    def _parse_project(raw: Any, body: str) -> Project:
        try:
            return Project.model_validate(raw)
        except ValidationError as e:
            logger.error("Project record failed validation: %s", e)
            raise DecodeError(e, body) from e

    async def iter_projects(self) -> AsyncIterator[Project]:
        """
        逐页获取组织下的全部项目

        首页携带 per_page=100，后续页面沿 Link 头中的 rel="next" 继续，
        直到服务端不再返回 next。每次调用都从第一页重新开始。

        Yields:
            Project，顺序与服务端返回一致
        """
        url = "/projects"
        params = {"per_page": PAGE_SIZE}
        visited = set()
        page = 0

        while url and url not in visited:
            visited.add(url)
            page += 1
            resp = await self.client.request("GET", url, params=params)
            self.client.check_status(resp, LIST_PROJECTS_DOCS_URL)
            data = self.client.decode(resp)

            if not isinstance(data, list):
                raise DecodeError("expected a list of projects", resp.text)

            logger.debug("Fetched page %d with %d projects", page, len(data))
            for raw in data:
                yield self._parse_project(raw, resp.text)

            url = resp.links.get("next", {}).get("url")
            # next 链接已包含完整查询串
            params = None

    async def list_projects(self) -> List[Project]:
        """获取组织下的全部项目，空组织返回空列表"""
        projects = [project async for project in self.iter_projects()]
        logger.info("Retrieved %d projects", len(projects))
        return projects

    async def get_project(self, project_id: str) -> Project:
        """
        获取单个项目

        Raises:
            UnexpectedStatus: 项目不存在等非 2xx 响应
        """
        logger.debug("Getting project: id=%s", project_id)
        resp = await self.client.request("GET", f"/projects/{project_id}")
        self.client.check_status(resp, PROJECT_DOCS_URL)
        return self._parse_project(self.client.decode(resp), resp.text)

    async def create_project(
        self, name: str, project_type: str, ignore_old_browsers: bool
    ) -> str:
        """
        创建项目，参数通过查询串传递（无请求体）

        Returns:
            新项目的 id

        Raises:
            MissingIdentifier: 响应中没有可用的 id
        """
        logger.info("Creating project: name=%s, type=%s", name, project_type)
        return await self._write_project("POST", name, project_type, ignore_old_browsers)

    async def update_project(
        self, name: str, project_type: str, ignore_old_browsers: bool
    ) -> str:
        """
        更新项目

        注意: 请求发往项目集合路径，URL 中不含目标项目 id。
        """
        logger.info("Updating project: name=%s, type=%s", name, project_type)
        return await self._write_project("PATCH", name, project_type, ignore_old_browsers)

    async def _write_project(
        self, method: str, name: str, project_type: str, ignore_old_browsers: bool
    ) -> str:
        params = {
            "name": name,
            "type": project_type,
            "ignore_old_browsers": ignore_old_browsers,
        }
        resp = await self.client.request(method, "/projects", params=params)
        self.client.check_status(resp, PROJECT_DOCS_URL)
        body = self.client.decode(resp)

        project_id = body.get("id") if isinstance(body, dict) else None
        if not isinstance(project_id, str) or not project_id:
            logger.error("No project ID in %s response", method)
            raise MissingIdentifier(body)

        logger.info("Project %s succeeded: id=%s", method, project_id)
        return project_id
