from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class Project(BaseModel):
    """Bugsnag 项目记录，解析时即做类型校验"""

    id: str
    name: str
    organization_id: Optional[str] = None
    type: Optional[str] = None
    slug: Optional[str] = None
    api_key: Optional[str] = None
    is_full_view: Optional[bool] = None
    language: Optional[str] = None

    global_grouping: List[str] = Field(default_factory=list)
    location_grouping: List[str] = Field(default_factory=list)
    discarded_app_versions: List[str] = Field(default_factory=list)
    discarded_errors: List[str] = Field(default_factory=list)
    url_whitelist: List[str] = Field(default_factory=list)
    release_stages: List[str] = Field(default_factory=list)

    ignore_old_browsers: Optional[bool] = None
    ignored_browser_versions: Dict[str, str] = Field(default_factory=dict)
    resolve_on_deploy: Optional[bool] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    url: Optional[str] = None
    html_url: Optional[str] = None
    errors_url: Optional[str] = None
    events_url: Optional[str] = None

    open_error_count: Optional[int] = None
    for_review_error_count: Optional[int] = None
    collaborators_count: Optional[int] = None
    custom_event_fields_used: Optional[int] = None

    # Allow extra fields for forward compatibility
    model_config = {"extra": "ignore"}

    @field_validator(
        "global_grouping",
        "location_grouping",
        "discarded_app_versions",
        "discarded_errors",
        "url_whitelist",
        "release_stages",
        mode="before",
    )
    @classmethod
    def _null_list(cls, value):
        return [] if value is None else value

    @field_validator("ignored_browser_versions", mode="before")
    @classmethod
    def _stringify_versions(cls, value):
        if value is None:
            return {}
        # 浏览器版本号有时以数字返回
        if isinstance(value, dict):
            return {k: str(v) for k, v in value.items() if v is not None}
        return value

    def to_state(self) -> dict:
        """转换为本地记录使用的 field -> value 字典"""
        return self.model_dump()
