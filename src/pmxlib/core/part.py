from enum import IntEnum, unique
from typing import TypeVar

from pmxlib.core.base import BaseModel


@unique
class Switch(IntEnum):
    """ON/OFFスイッチ"""

    OFF = 0
    ON = 1


TBaseIndexModel = TypeVar("TBaseIndexModel", bound="BaseIndexModel")


class BaseIndexModel(BaseModel):
    """
    INDEXを持つ基底クラス
    """

    __slots__ = ("index",)

    def __init__(self, index: int = -1) -> None:
        """
        初期化

        Parameters
        ----------
        index : int, optional
            INDEX, by default -1
        """
        super().__init__()
        self.index = index

    def __bool__(self) -> bool:
        return 0 <= self.index


TBaseIndexNameModel = TypeVar("TBaseIndexNameModel", bound="BaseIndexNameModel")


class BaseIndexNameModel(BaseModel):
    """
    INDEXと名前を持つ基底クラス
    """

    __slots__ = ("index", "name", "english_name")

    def __init__(self, index: int = -1, name: str = "", english_name: str = "") -> None:
        """
        初期化

        Parameters
        ----------
        index : int, optional
            INDEX, by default -1
        name : str, optional
            名前, by default ""
        english_name : str, optional
            英語名, by default ""
        """
        super().__init__()
        self.index: int = index
        self.name: str = name
        self.english_name: str = english_name

    def __bool__(self) -> bool:
        return 0 <= self.index
