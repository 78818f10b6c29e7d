from typing import Generic, Iterator, TypeVar, Union

from pmxlib.core.base import BaseModel
from pmxlib.core.part import BaseIndexModel, BaseIndexNameModel

TBaseIndexModel = TypeVar("TBaseIndexModel", bound=BaseIndexModel)
TBaseIndexNameModel = TypeVar("TBaseIndexNameModel", bound=BaseIndexNameModel)


class BaseIndexDictModel(Generic[TBaseIndexModel], BaseModel):
    """BaseIndexModelのリスト基底クラス"""

    __slots__ = (
        "data",
        "indexes",
    )

    def __init__(self) -> None:
        """モデルリスト"""
        super().__init__()
        self.data: dict[int, TBaseIndexModel] = {}
        self.indexes: list[int] = []

    def __getitem__(self, index: int) -> TBaseIndexModel:
        if 0 > index:
            # マイナス指定の場合、後ろからの順番に置き換える
            return self.data[self.indexes[len(self.indexes) + index]]
        return self.data[index]

    def append(self, value: TBaseIndexModel, is_sort: bool = False) -> None:
        if 0 > value.index:
            value.index = len(self.data)
        self.data[value.index] = value
        if is_sort:
            self.sort_indexes()
        else:
            self.indexes.append(value.index)

    def sort_indexes(self) -> None:
        self.indexes = sorted(self.data.keys()) if self.data else []

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[TBaseIndexModel]:
        return iter([self.data[k] for k in sorted(self.data.keys())])

    def __contains__(self, key: int) -> bool:
        return key in self.data

    def __bool__(self) -> bool:
        return 0 < len(self.data)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        return list(self) == list(other)  # type: ignore

    __hash__ = None  # type: ignore


class BaseIndexNameDictModel(Generic[TBaseIndexNameModel], BaseModel):
    """BaseIndexNameModelの辞書基底クラス"""

    __slots__ = (
        "name",
        "data",
        "indexes",
        "_names",
    )

    def __init__(self, name: str = "") -> None:
        """モデル辞書"""
        super().__init__()
        self.name = name
        self.data: dict[int, TBaseIndexNameModel] = {}
        self.indexes: list[int] = []
        self._names: dict[str, int] = {}

    def __getitem__(self, key: Union[int, str]) -> TBaseIndexNameModel:
        if isinstance(key, str):
            return self.get_by_name(key)
        else:
            return self.get_by_index(int(key))

    def append(self, value: TBaseIndexNameModel, is_sort: bool = False) -> None:
        if 0 > value.index:
            value.index = len(self.data)

        if value.name and value.name not in self._names:
            # 名前は先勝ちで保持
            self._names[value.name] = value.index

        self.data[value.index] = value
        if is_sort:
            self.sort_indexes()
        else:
            self.indexes.append(value.index)

    def sort_indexes(self) -> None:
        self.indexes = sorted(self.data.keys()) if self.data else []

    @property
    def names(self) -> list[str]:
        return list(self._names.keys())

    def get_by_index(self, index: int) -> TBaseIndexNameModel:
        """
        リストから要素を取得する

        Parameters
        ----------
        index : int
            index

        Returns
        -------
        TBaseIndexNameModel
            要素
        """
        if 0 > index:
            # マイナス指定の場合、後ろからの順番に置き換える
            return self.data[self.indexes[len(self.indexes) + index]]
        return self.data[index]

    def get_by_name(self, name: str) -> TBaseIndexNameModel:
        """
        名前から要素を取得する

        Parameters
        ----------
        name : str
            名前

        Returns
        -------
        TBaseIndexNameModel
            要素
        """
        return self.data[self._names[name]]

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[TBaseIndexNameModel]:
        return iter([self.data[k] for k in sorted(self.data.keys())])

    def __contains__(self, key: Union[int, str]) -> bool:
        if isinstance(key, str):
            return key in self._names
        return key in self.data

    def __bool__(self) -> bool:
        return 0 < len(self.data)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        return list(self) == list(other)  # type: ignore

    __hash__ = None  # type: ignore
