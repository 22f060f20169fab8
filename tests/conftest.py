import logging
import sys

import pytest
import pytest_asyncio

from bugsnag_provider.core.client import BugsnagClient
from bugsnag_provider.providers.bugsnag.api import ProjectAPI

# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)
logger.info("Test logging configured: level=DEBUG")

ORG_ID = "org-1"
BASE_URL = f"https://api.bugsnag.com/organizations/{ORG_ID}"
API_TOKEN = "secret-token"


@pytest.fixture(autouse=True)
def log_test_start(request):
    """Log test start and end for each test."""
    logger.info("=" * 80)
    logger.info("Starting test: %s", request.node.name)
    yield
    logger.info("Completed test: %s", request.node.name)
    logger.info("=" * 80)


@pytest.fixture
def base_url():
    return BASE_URL


@pytest_asyncio.fixture
async def client():
    """指向 mock 组织的 BugsnagClient，测试结束后关闭"""
    bugsnag_client = BugsnagClient(api_token=API_TOKEN, organization_id=ORG_ID)
    yield bugsnag_client
    await bugsnag_client.close()


@pytest.fixture
def api(client):
    return ProjectAPI(client)


@pytest.fixture
def make_project():
    """构造一条 Bugsnag 项目 JSON 记录"""

    def _make(project_id: str = "p1", name: str = "web", **overrides):
        record = {
            "id": project_id,
            "organization_id": ORG_ID,
            "name": name,
            "slug": name,
            "api_key": f"key-{project_id}",
            "type": "rails",
            "is_full_view": True,
            "release_stages": ["production"],
            "language": "ruby",
            "created_at": "2024-01-01T00:00:00.000Z",
            "updated_at": "2024-01-02T00:00:00.000Z",
            "url": f"{BASE_URL}/projects/{project_id}",
            "html_url": f"https://app.bugsnag.com/acme/{name}",
            "errors_url": f"https://api.bugsnag.com/projects/{project_id}/errors",
            "events_url": f"https://api.bugsnag.com/projects/{project_id}/events",
            "global_grouping": [],
            "location_grouping": [],
            "discarded_app_versions": [],
            "discarded_errors": [],
            "url_whitelist": [],
            "ignore_old_browsers": False,
            "ignored_browser_versions": {"chrome": "45"},
            "resolve_on_deploy": False,
            "open_error_count": 3,
            "for_review_error_count": 1,
            "collaborators_count": 4,
            "custom_event_fields_used": 0,
        }
        record.update(overrides)
        return record

    return _make
