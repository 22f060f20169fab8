"""
ProjectAPI 测试模块

测试覆盖:
1. list_projects / iter_projects - 正常响应、空组织、分页、限流、错误处理
2. get_project - 正常响应、不存在
3. create_project / update_project - 查询串编码、缺少 id
"""

import pytest
from httpx import Response

from bugsnag_provider.core.errors import (
    DecodeError,
    MissingIdentifier,
    RateLimited,
    UnexpectedStatus,
)


class TestListProjects:
    @pytest.mark.asyncio
    async def test_list_projects_success(self, api, base_url, respx_mock, make_project):
        route = respx_mock.get(f"{base_url}/projects").mock(
            return_value=Response(
                200, json=[make_project("p1", "web"), make_project("p2", "api")]
            )
        )

        projects = await api.list_projects()

        assert [p.name for p in projects] == ["web", "api"]
        assert route.call_count == 1
        assert route.calls.last.request.url.params["per_page"] == "100"

    @pytest.mark.asyncio
    async def test_list_projects_empty(self, api, base_url, respx_mock):
        respx_mock.get(f"{base_url}/projects").mock(return_value=Response(200, json=[]))

        assert await api.list_projects() == []

    @pytest.mark.asyncio
    async def test_null_collections_become_empty(
        self, api, base_url, respx_mock, make_project
    ):
        nulls = make_project(
            "p2",
            "api",
            global_grouping=None,
            location_grouping=None,
            discarded_app_versions=None,
            discarded_errors=None,
            url_whitelist=None,
            release_stages=None,
            ignored_browser_versions=None,
        )
        respx_mock.get(f"{base_url}/projects").mock(
            return_value=Response(200, json=[make_project("p1", "web"), nulls])
        )

        projects = await api.list_projects()

        assert [p.id for p in projects] == ["p1", "p2"]
        assert projects[1].release_stages == []
        assert projects[1].url_whitelist == []
        assert projects[1].ignored_browser_versions == {}

    @pytest.mark.asyncio
    async def test_follows_next_link(self, api, base_url, respx_mock, make_project):
        next_url = f"{base_url}/projects?offset=p2&per_page=100"
        route = respx_mock.get(f"{base_url}/projects").mock(
            side_effect=[
                Response(
                    200,
                    json=[make_project("p1", "web")],
                    headers={"Link": f'<{next_url}>; rel="next"'},
                ),
                Response(200, json=[make_project("p2", "api")]),
            ]
        )

        projects = await api.list_projects()

        assert [p.id for p in projects] == ["p1", "p2"]
        assert route.call_count == 2
        assert route.calls[1].request.url.params["offset"] == "p2"

    @pytest.mark.asyncio
    async def test_iter_projects_is_restartable(
        self, api, base_url, respx_mock, make_project
    ):
        route = respx_mock.get(f"{base_url}/projects").mock(
            return_value=Response(200, json=[make_project()])
        )

        first = [p.id async for p in api.iter_projects()]
        second = [p.id async for p in api.iter_projects()]

        assert first == second == ["p1"]
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_list_projects_rate_limited(self, api, base_url, respx_mock):
        respx_mock.get(f"{base_url}/projects").mock(
            return_value=Response(429, text="Too Many Requests")
        )

        with pytest.raises(RateLimited):
            await api.list_projects()

    @pytest.mark.asyncio
    async def test_list_projects_unexpected_status(self, api, base_url, respx_mock):
        respx_mock.get(f"{base_url}/projects").mock(
            return_value=Response(401, text='{"errors":["Unauthorized"]}')
        )

        with pytest.raises(UnexpectedStatus) as exc_info:
            await api.list_projects()

        assert exc_info.value.body == '{"errors":["Unauthorized"]}'
        assert "list-an-organization's-projects" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_list_projects_not_a_list(self, api, base_url, respx_mock):
        respx_mock.get(f"{base_url}/projects").mock(
            return_value=Response(200, json={"projects": []})
        )

        with pytest.raises(DecodeError):
            await api.list_projects()


class TestGetProject:
    @pytest.mark.asyncio
    async def test_get_project_success(self, api, base_url, respx_mock, make_project):
        respx_mock.get(f"{base_url}/projects/p1").mock(
            return_value=Response(200, json=make_project())
        )

        project = await api.get_project("p1")

        assert project.id == "p1"
        assert project.slug == "web"

    @pytest.mark.asyncio
    async def test_get_project_not_found(self, api, base_url, respx_mock):
        respx_mock.get(f"{base_url}/projects/missing").mock(
            return_value=Response(404, text='{"errors":["Not found"]}')
        )

        with pytest.raises(UnexpectedStatus) as exc_info:
            await api.get_project("missing")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_get_project_invalid_record(self, api, base_url, respx_mock):
        respx_mock.get(f"{base_url}/projects/p1").mock(
            return_value=Response(200, json={"id": "p1"})
        )

        with pytest.raises(DecodeError):
            await api.get_project("p1")


class TestWriteProject:
    @pytest.mark.asyncio
    async def test_create_project_sends_query_params(self, api, base_url, respx_mock):
        route = respx_mock.post(f"{base_url}/projects").mock(
            return_value=Response(200, json={"id": "new-id", "name": "my app"})
        )

        project_id = await api.create_project("my app", "rails", True)

        assert project_id == "new-id"
        request = route.calls.last.request
        assert request.url.params["name"] == "my app"
        assert request.url.params["type"] == "rails"
        assert request.url.params["ignore_old_browsers"] == "true"
        assert request.content == b""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            pytest.param({"name": "web"}, id="no_id"),
            pytest.param({"id": ""}, id="empty_id"),
            pytest.param({"id": 123}, id="non_string_id"),
            pytest.param([], id="not_an_object"),
        ],
    )
    async def test_create_project_missing_id(self, api, base_url, respx_mock, body):
        respx_mock.post(f"{base_url}/projects").mock(
            return_value=Response(200, json=body)
        )

        with pytest.raises(MissingIdentifier) as exc_info:
            await api.create_project("web", "rails", False)

        assert exc_info.value.body == body

    @pytest.mark.asyncio
    async def test_create_project_unexpected_status(self, api, base_url, respx_mock):
        respx_mock.post(f"{base_url}/projects").mock(
            return_value=Response(422, text='{"errors":["type is invalid"]}')
        )

        with pytest.raises(UnexpectedStatus) as exc_info:
            await api.create_project("web", "nope", False)

        assert "type is invalid" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_update_project_targets_collection(self, api, base_url, respx_mock):
        route = respx_mock.patch(f"{base_url}/projects").mock(
            return_value=Response(200, json={"id": "p1"})
        )

        project_id = await api.update_project("web", "rails", False)

        assert project_id == "p1"
        request = route.calls.last.request
        assert request.url.path == "/organizations/org-1/projects"
        assert request.url.params["ignore_old_browsers"] == "false"
