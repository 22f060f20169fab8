"""
ResourceData - 声明式引擎侧的本地记录

引擎为每次操作提供一个 ResourceData：按 schema 读写字段，并通过 set_id 分配标识。
id 为空字符串表示该实体不再被追踪。
"""

import logging
from typing import Any, Dict, List, Optional

from bugsnag_provider.schemas.fields import FieldSchema, FieldType, Schema

logger = logging.getLogger(__name__)

_ZERO_VALUES = {
    FieldType.STRING: "",
    FieldType.BOOL: False,
    FieldType.INT: 0,
}


def _zero_value(field: FieldSchema) -> Any:
    if field.type == FieldType.LIST:
        return []
    if field.type == FieldType.MAP:
        return {}
    return _ZERO_VALUES[field.type]


def _check_scalar(field_type: FieldType, value: Any) -> None:
    if field_type == FieldType.STRING:
        ok = isinstance(value, str)
    elif field_type == FieldType.BOOL:
        ok = isinstance(value, bool)
    elif field_type == FieldType.INT:
        # bool 是 int 的子类，需要排除
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = False
    if not ok:
        raise TypeError(
            f"expected {field_type.value}, got {type(value).__name__}: {value!r}"
        )


def validate_value(field: FieldSchema, value: Any) -> Any:
    """
    按字段类型校验值，返回可安全保存的副本

    Raises:
        TypeError: 值与字段类型不匹配
    """
    if value is None:
        return None

    if field.type == FieldType.LIST:
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"expected list, got {type(value).__name__}: {value!r}")
        if isinstance(field.elem, dict):
            return [validate_record(field.elem, item) for item in value]
        elem_type = field.elem or FieldType.STRING
        for item in value:
            _check_scalar(elem_type, item)
        return list(value)

    if field.type == FieldType.MAP:
        if not isinstance(value, dict):
            raise TypeError(f"expected map, got {type(value).__name__}: {value!r}")
        elem_type = field.elem if isinstance(field.elem, FieldType) else FieldType.STRING
        for key, item in value.items():
            _check_scalar(FieldType.STRING, key)
            _check_scalar(elem_type, item)
        return dict(value)

    _check_scalar(field.type, value)
    return value


def validate_record(schema: Schema, record: Any) -> Dict[str, Any]:
    """校验一条嵌套记录，未在 schema 中声明的 key 会被丢弃"""
    if not isinstance(record, dict):
        raise TypeError(f"expected record, got {type(record).__name__}: {record!r}")
    return {
        name: validate_value(field, record.get(name))
        for name, field in schema.items()
    }


class ResourceData:
    def __init__(
        self,
        schema: Schema,
        values: Optional[Dict[str, Any]] = None,
        id: str = "",
    ):
        self.schema = schema
        self._values: Dict[str, Any] = {}
        self._id = id or ""
        for key, value in (values or {}).items():
            self.set(key, value)

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        """分配标识；清空时同时清掉 schema 中的 id 字段"""
        logger.debug("Assigning id: %r -> %r", self._id, value)
        self._id = value or ""
        if not self._id:
            self._values.pop("id", None)

    def _field(self, key: str) -> FieldSchema:
        try:
            return self.schema[key]
        except KeyError:
            raise KeyError(f"unknown field: {key}") from None

    def get(self, key: str) -> Any:
        """读取字段值；未设置时返回该类型的零值"""
        field = self._field(key)
        value = self._values.get(key)
        return _zero_value(field) if value is None else value

    def get_ok(self, key: str) -> bool:
        """字段是否被显式设置过（非 None）"""
        self._field(key)
        return self._values.get(key) is not None

    def set(self, key: str, value: Any) -> None:
        """
        写入字段值

        Raises:
            KeyError: 字段未在 schema 中声明
            TypeError: 值与字段类型不匹配
        """
        field = self._field(key)
        self._values[key] = validate_value(field, value)

    def missing_required(self) -> List[str]:
        """返回未设置（None 或空字符串）的 required 字段名"""
        return [
            name
            for name, field in self.schema.items()
            if field.required and self._values.get(name) in (None, "")
        ]

    def state(self) -> Dict[str, Any]:
        """导出当前记录（含 id），未设置的字段为 None"""
        data = {key: self._values.get(key) for key in self.schema}
        if "id" in self.schema:
            data["id"] = self._values.get("id") or self._id or None
        return data
