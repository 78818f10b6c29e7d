from typing import TypeVar

import numpy as np
from quaternion import quaternion

from .base import BaseModel

MVectorT = TypeVar("MVectorT", bound="MVector")


class MVector(BaseModel):
    """ベクトル基底クラス"""

    __slots__ = ("vector",)

    def __init__(self, x: float = 0.0):
        self.vector = np.array([x], dtype=np.float64)

    def copy(self: MVectorT) -> MVectorT:
        return self.__class__(*self.vector)

    def __eq__(self: MVectorT, other) -> bool:
        if isinstance(other, MVector):
            return type(self) is type(other) and bool(
                np.array_equal(self.vector, other.vector)
            )
        return bool(np.all(np.equal(self.vector, other)))

    def __ne__(self: MVectorT, other) -> bool:
        return not self == other

    def __bool__(self: MVectorT) -> bool:
        return bool(not np.all(self.vector == 0))

    def __hash__(self: MVectorT) -> int:
        return hash(tuple(self.vector.flatten()))

    def __iter__(self):
        return iter(self.vector.tolist())

    def __len__(self) -> int:
        return len(self.vector)

    @property
    def x(self: MVectorT) -> float:
        return self.vector[0]

    @x.setter
    def x(self: MVectorT, v: float) -> None:
        self.vector[0] = v

    def __getitem__(self: MVectorT, index: int) -> float:
        return self.vector[index]


class MVector2D(MVector):
    """
    2次元ベクトルクラス
    """

    def __init__(self, x: float = 0.0, y: float = 0.0):
        """
        初期化

        Parameters
        ----------
        x : float, optional
            X値, by default 0.0
        y : float, optional
            Y値, by default 0.0
        """
        self.vector = np.array([x, y], dtype=np.float64)

    def __str__(self) -> str:
        return f"[x={round(self.vector[0], 5)}, y={round(self.vector[1], 5)}]"

    @property
    def y(self) -> float:
        return self.vector[1]

    @y.setter
    def y(self, v) -> None:
        self.vector[1] = v


class MVector3D(MVector):
    """
    3次元ベクトルクラス
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.vector = np.array([x, y, z], dtype=np.float64)

    def __str__(self) -> str:
        """
        ログ用文字列に変換
        """
        return f"[x={round(self.vector[0], 5)}, y={round(self.vector[1], 5)}, z={round(self.vector[2], 5)}]"

    @property
    def y(self) -> float:
        return self.vector[1]

    @y.setter
    def y(self, v: float) -> None:
        self.vector[1] = v

    @property
    def z(self) -> float:
        return self.vector[2]

    @z.setter
    def z(self, v: float) -> None:
        self.vector[2] = v


class MVector4D(MVector):
    """
    4次元ベクトルクラス
    """

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        w: float = 0.0,
    ):
        self.vector = np.array([x, y, z, w], dtype=np.float64)

    def __str__(self) -> str:
        return (
            f"[x={round(self.vector[0], 5)}, y={round(self.vector[1], 5)}, "
            + f"z={round(self.vector[2], 5)}, w={round(self.vector[3], 5)}]"
        )

    @property
    def y(self) -> float:
        return self.vector[1]

    @y.setter
    def y(self, v: float) -> None:
        self.vector[1] = v

    @property
    def z(self) -> float:
        return self.vector[2]

    @z.setter
    def z(self, v: float) -> None:
        self.vector[2] = v

    @property
    def w(self) -> float:
        return self.vector[3]

    @w.setter
    def w(self, v: float) -> None:
        self.vector[3] = v


class MQuaternion(MVector):
    """
    クォータニオンクラス
    """

    def __init__(
        self,
        scalar: float = 1.0,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
    ):
        self.vector: quaternion = quaternion(scalar, x, y, z)

    def copy(self) -> "MQuaternion":
        return self.__class__(self.scalar, self.x, self.y, self.z)

    @property
    def scalar(self) -> float:
        return float(self.vector.w)

    @scalar.setter
    def scalar(self, v: float) -> None:
        self.vector.w = v

    @property
    def w(self) -> float:
        return float(self.vector.w)

    @w.setter
    def w(self, v: float) -> None:
        self.vector.w = v

    @property
    def x(self) -> float:
        return float(self.vector.x)

    @x.setter
    def x(self, v: float) -> None:
        self.vector.x = v

    @property
    def y(self) -> float:
        return float(self.vector.y)

    @y.setter
    def y(self, v: float) -> None:
        self.vector.y = v

    @property
    def z(self) -> float:
        return float(self.vector.z)

    @z.setter
    def z(self, v: float) -> None:
        self.vector.z = v

    def __eq__(self, other) -> bool:
        if not isinstance(other, MQuaternion):
            return False
        return bool(np.array_equal(self.wxyz, other.wxyz))

    def __bool__(self) -> bool:
        return not np.array_equal(self.wxyz, [1, 0, 0, 0])

    def __hash__(self) -> int:
        return hash(tuple(self.wxyz))

    def __iter__(self):
        return iter(self.wxyz)

    def __len__(self) -> int:
        return 4

    def __str__(self) -> str:
        return (
            f"[x={round(self.x, 5)}, y={round(self.y, 5)}, "
            + f"z={round(self.z, 5)}, scalar={round(self.scalar, 5)}]"
        )

    @property
    def wxyz(self) -> list[float]:
        return [self.scalar, self.x, self.y, self.z]
