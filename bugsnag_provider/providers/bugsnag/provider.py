"""
Bugsnag Provider

new_provider(version) 每次返回一个新的 Provider 实例，没有进程级单例。
configure() 校验凭证、创建 BugsnagClient，并把资源与数据源接入同一个客户端。
"""

import logging
from typing import Any, Dict, List, Optional, Union

from bugsnag_provider.core.client import HTTP_TOO_MANY_REQUESTS, BugsnagClient
from bugsnag_provider.core.config import Settings, get_settings
from bugsnag_provider.core.errors import (
    AUTH_DOCS_URL,
    ORGANIZATIONS_DOCS_URL,
    AuthenticationFailed,
    BugsnagError,
    ConfigurationError,
    RateLimited,
    TransportError,
)
from bugsnag_provider.providers.bugsnag.api import ProjectAPI
from bugsnag_provider.providers.bugsnag.data_source_project import (
    ProjectDataSource,
    ProjectsDataSource,
    project_lookup_schema,
    projects_schema,
)
from bugsnag_provider.providers.bugsnag.resource_project import (
    ProjectResource,
    resource_schema,
)
from bugsnag_provider.schemas.diagnostic import Diagnostic
from bugsnag_provider.schemas.fields import (
    FieldSchema,
    FieldType,
    Schema,
    schema_to_dict,
)

logger = logging.getLogger(__name__)

HTTP_OK = 200

DataSource = Union[ProjectsDataSource, ProjectDataSource]


def provider_schema() -> Schema:
    return {
        "organization_id": FieldSchema(
            type=FieldType.STRING,
            optional=True,
            description="Bugsnag organization ID. Defaults to `$BUGSNAG_ORGANIZATION_ID`.",
        ),
        "api_token": FieldSchema(
            type=FieldType.STRING,
            optional=True,
            sensitive=True,
            description="Bugsnag personal auth token. Defaults to `$BUGSNAG_API_TOKEN`.",
        ),
    }


class Provider:
    def __init__(self, version: str, settings: Optional[Settings] = None):
        self.version = version
        self.settings = settings or get_settings()
        self.client: Optional[BugsnagClient] = None
        self.resources: Dict[str, ProjectResource] = {}
        self.data_sources: Dict[str, DataSource] = {}

    @property
    def configured(self) -> bool:
        return self.client is not None

    def describe(self) -> Dict[str, Any]:
        """导出 provider / 资源 / 数据源的字段描述"""
        # schema 与客户端无关，未配置时也可以导出
        return {
            "version": self.version,
            "provider": schema_to_dict(provider_schema()),
            "resources": {
                ProjectResource.type_name: schema_to_dict(resource_schema()),
            },
            "data_sources": {
                ProjectsDataSource.type_name: schema_to_dict(projects_schema()),
                ProjectDataSource.type_name: schema_to_dict(project_lookup_schema()),
            },
        }

    async def configure(self, config: Optional[Dict[str, Any]] = None) -> List[Diagnostic]:
        """
        配置 provider

        Args:
            config: provider 配置块，api_token / organization_id 缺省时读取环境变量

        Returns:
            诊断列表；为空表示配置成功
        """
        try:
            client = await self._build_client(config or {})
        except BugsnagError as e:
            logger.error("Provider configuration failed: %s", e.summary)
            return [e.to_diagnostic()]

        await self.close()
        api = ProjectAPI(client)
        self.client = client
        self.resources = {ProjectResource.type_name: ProjectResource(api)}
        self.data_sources = {
            ProjectsDataSource.type_name: ProjectsDataSource(api),
            ProjectDataSource.type_name: ProjectDataSource(api),
        }
        logger.info(
            "Provider %s configured for organization %s",
            self.version,
            client.organization_id,
        )
        return []

    async def _build_client(self, config: Dict[str, Any]) -> BugsnagClient:
        api_token = config.get("api_token") or self.settings.BUGSNAG_API_TOKEN
        if not api_token:
            raise ConfigurationError(
                "Bugsnag API Token not provided",
                "You did not provide the Bugsnag API token used for authentication.\n"
                "Please export the API token's value to $BUGSNAG_API_TOKEN.\n"
                f"For further, see {AUTH_DOCS_URL}",
            )

        organization_id = (
            config.get("organization_id") or self.settings.BUGSNAG_ORGANIZATION_ID
        )
        if not organization_id:
            raise ConfigurationError(
                "Bugsnag organization ID not provided",
                "You did not provide the Bugsnag organization ID.\n"
                "To get the value, ask your administrator or send an authenticated "
                "request to https://api.bugsnag.com/user/organizations.\n"
                "Please provide it in the provider block or export its value to "
                "$BUGSNAG_ORGANIZATION_ID.\n"
                f"For further, see {ORGANIZATIONS_DOCS_URL}.",
            )

        client = BugsnagClient(
            api_token,
            organization_id,
            base_url=self.settings.BUGSNAG_API_BASE_URL,
            timeout=self.settings.BUGSNAG_HTTP_TIMEOUT,
        )
        try:
            status = await client.test_auth()
        except TransportError as e:
            await client.close()
            raise ConfigurationError("Unable to authenticate to Bugsnag", e.detail) from e

        if status == HTTP_OK:
            return client

        await client.close()
        if status == HTTP_TOO_MANY_REQUESTS:
            raise RateLimited(
                "You have reached Bugsnag's API rate limit.\n"
                "Please wait a moment and try again."
            )
        raise AuthenticationFailed(client.host_url)

    async def close(self):
        if self.client is not None:
            await self.client.close()
            self.client = None


def new_provider(version: str, settings: Optional[Settings] = None) -> Provider:
    """每次调用返回一个新的 Provider"""
    return Provider(version, settings)
