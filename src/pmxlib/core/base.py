from enum import Enum, unique
from pickle import HIGHEST_PROTOCOL, dumps, loads
from typing import Any, TypeVar

import numpy as np

from pmxlib.core.logger import parse2str


@unique
class Encoding(Enum):
    UTF_16_LE = "utf-16-le"
    UTF_8 = "utf-8"


TBaseModel = TypeVar("TBaseModel", bound="BaseModel")


def attribute_items(obj: object) -> list[tuple[str, Any]]:
    """__slots__ と __dict__ の両方から属性名と値の一覧を取得する"""
    names: list[str] = []
    for cls in type(obj).__mro__:
        for name in getattr(cls, "__slots__", ()):
            if name not in names and not name.startswith("__"):
                names.append(name)
    for name in getattr(obj, "__dict__", {}):
        if name not in names:
            names.append(name)
    return [(name, getattr(obj, name)) for name in names if hasattr(obj, name)]


def equal_value(v1: Any, v2: Any) -> bool:
    if isinstance(v1, np.ndarray) or isinstance(v2, np.ndarray):
        return bool(np.array_equal(v1, v2))
    return bool(v1 == v2)


class BaseModel:
    """基底クラス"""

    def __init__(self) -> None:
        pass

    def __str__(self) -> str:
        return parse2str(self)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        other_items = dict(attribute_items(other))
        self_items = attribute_items(self)
        if len(self_items) != len(other_items):
            return False
        for k, v in self_items:
            if k not in other_items or not equal_value(v, other_items[k]):
                return False
        return True

    __hash__ = None  # type: ignore

    def copy(self: TBaseModel) -> TBaseModel:
        return loads(dumps(self, protocol=HIGHEST_PROTOCOL))
