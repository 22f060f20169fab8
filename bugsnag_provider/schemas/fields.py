"""
Project 字段映射

描述本地字段名、类型以及“调用方提供 / 服务端计算”的区分。
本地字段名与 Bugsnag JSON key 一一对应。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union


class FieldType(str, Enum):
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    LIST = "list"
    MAP = "map"


@dataclass(frozen=True)
class FieldSchema:
    """单个字段的元数据"""

    type: FieldType
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    # LIST / MAP 的元素类型；LIST 也可以是嵌套的 schema（每个元素为一条记录）
    elem: Optional[Union[FieldType, Dict[str, "FieldSchema"]]] = None
    description: str = ""

    def to_dict(self) -> dict:
        data = {
            "type": self.type.value,
            "required": self.required,
            "optional": self.optional,
            "computed": self.computed,
            "sensitive": self.sensitive,
            "description": self.description,
        }
        if isinstance(self.elem, FieldType):
            data["elem"] = self.elem.value
        elif self.elem is not None:
            data["elem"] = schema_to_dict(self.elem)
        return data


Schema = Dict[str, FieldSchema]


def _computed(field_type: FieldType, description: str = "", **kwargs) -> FieldSchema:
    return FieldSchema(
        type=field_type, computed=True, description=description, **kwargs
    )


def _string_list(description: str) -> FieldSchema:
    return _computed(FieldType.LIST, description, elem=FieldType.STRING)


def _input(field_type: FieldType, required: bool, description: str) -> FieldSchema:
    if required:
        return FieldSchema(type=field_type, required=True, description=description)
    return _computed(field_type, description)


def project_schema(
    *,
    name_required: bool,
    type_required: bool,
    ignore_old_browsers_required: bool,
) -> Schema:
    """
    构建 Project 字段映射

    同一组字段在三种场景复用：资源的创建/更新、已有资源的回读、按名称查找的数据源。

    Args:
        name_required: True 时 name 由调用方提供（required），否则为服务端计算字段
        type_required: True 时 type 由调用方提供（required），否则为服务端计算字段
        ignore_old_browsers_required: True 时 ignore_old_browsers 必填；
            否则为 optional + computed，调用方可以不填，由服务端给出当前值

    Returns:
        字段名 -> FieldSchema
    """
    if ignore_old_browsers_required:
        ignore_old_browsers = FieldSchema(
            type=FieldType.BOOL,
            required=True,
            description="Whether errors from old browsers are ignored.",
        )
    else:
        ignore_old_browsers = FieldSchema(
            type=FieldType.BOOL,
            optional=True,
            computed=True,
            description="Whether errors from old browsers are ignored.",
        )

    return {
        "name": _input(FieldType.STRING, name_required, "Project name."),
        "global_grouping": _string_list("Error classes grouped across the project."),
        "location_grouping": _string_list("Error classes grouped by location."),
        "discarded_app_versions": _string_list("App versions whose errors are discarded."),
        "discarded_errors": _string_list("Error classes that are discarded."),
        "url_whitelist": _string_list("URLs allowed to report errors."),
        "ignore_old_browsers": ignore_old_browsers,
        "ignored_browser_versions": _computed(
            FieldType.MAP,
            "Browser name to the oldest version still reported.",
            elem=FieldType.STRING,
        ),
        "resolve_on_deploy": _computed(FieldType.BOOL),
        "id": _computed(FieldType.STRING, "Project identifier."),
        "organization_id": _computed(FieldType.STRING),
        "type": _input(
            FieldType.STRING, type_required, "Project platform type, e.g. `rails`."
        ),
        "slug": _computed(FieldType.STRING),
        "api_key": _computed(
            FieldType.STRING, "Notifier API key.", sensitive=True
        ),
        "is_full_view": _computed(FieldType.BOOL),
        "release_stages": _string_list("Release stages seen by the project."),
        "language": _computed(FieldType.STRING),
        "created_at": _computed(FieldType.STRING),
        "updated_at": _computed(FieldType.STRING),
        "url": _computed(FieldType.STRING),
        "html_url": _computed(FieldType.STRING),
        "errors_url": _computed(FieldType.STRING),
        "events_url": _computed(FieldType.STRING),
        "open_error_count": _computed(FieldType.INT),
        "for_review_error_count": _computed(FieldType.INT),
        "collaborators_count": _computed(FieldType.INT),
        "custom_event_fields_used": _computed(FieldType.INT),
    }


def schema_to_dict(schema: Schema) -> dict:
    return {name: field.to_dict() for name, field in schema.items()}
