from enum import IntEnum, unique
from struct import Struct
from typing import TYPE_CHECKING

from pmxlib.core.base import BaseModel, Encoding
from pmxlib.core.exception import (
    MInvalidIndexWidthException,
    MInvalidSettingException,
    MUnknownEncodingException,
)
from pmxlib.core.reader import StructUnpackType

if TYPE_CHECKING:
    from pmxlib.pmx.pmx_collection import PmxModel


NO_INDEX = -1
"""参照なしを表すINDEX(頂点以外)"""

INDEX_WIDTHS = (1, 2, 4)
"""INDEXサイズとして有効なバイト数"""

MAX_EXTENDED_UV_COUNT = 4

SETTING_SIZE = 8
"""PMX2.0/2.1 の設定データ列のバイトサイズ"""

ENCODING_TYPES: dict[int, Encoding] = {
    0: Encoding.UTF_16_LE,
    1: Encoding.UTF_8,
}


@unique
class IndexKind(IntEnum):
    """INDEXの参照先種別(設定データ列内の並び順)"""

    VERTEX = 0
    """0:頂点"""
    TEXTURE = 1
    """1:テクスチャ"""
    MATERIAL = 2
    """2:材質"""
    BONE = 3
    """3:ボーン"""
    MORPH = 4
    """4:モーフ"""
    RIGIDBODY = 5
    """5:剛体"""

    @property
    def is_nullable(self) -> bool:
        """参照なし(-1)を取り得るか(頂点のみ常に参照あり)"""
        return IndexKind.VERTEX != self


class IndexFormat:
    """
    INDEXの読み書き形式

    頂点は符号なし、それ以外は符号ありで -1 を参照なしとする。
    頂点の4byteは全bit立ち(0xFFFFFFFF)を未使用値として予約する。

    Parameters
    ----------
    kind : IndexKind
        参照先種別
    width : int
        バイト数 1,2,4 のいずれか
    """

    __slots__ = ("kind", "width", "format", "min_value", "max_value", "unpack_type")

    SIGNED_FORMATS = {1: "b", 2: "h", 4: "i"}
    UNSIGNED_FORMATS = {1: "B", 2: "H", 4: "I"}

    def __init__(self, kind: IndexKind, width: int) -> None:
        if width not in INDEX_WIDTHS:
            raise MInvalidIndexWidthException(
                "INDEXサイズが不正です kind: {k}, width: {w}", k=kind.name, w=width
            )
        self.kind = kind
        self.width = width
        if kind.is_nullable:
            self.format = self.SIGNED_FORMATS[width]
            # -1 未満の負数は参照として書き出さない
            self.min_value = NO_INDEX
            self.max_value = 2 ** (8 * width - 1) - 1
        else:
            self.format = self.UNSIGNED_FORMATS[width]
            self.min_value = 0
            self.max_value = 2 ** (8 * width) - 1
            if 4 == width:
                # 全bit立ちは未使用値
                self.max_value -= 1
        self.unpack_type = StructUnpackType(Struct(f"<{self.format}").unpack_from, width)

    def can_represent(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value


def define_index_width(count: int, kind: IndexKind) -> int:
    """
    要素数から最小のINDEXサイズを求める

    Parameters
    ----------
    count : int
        参照先の要素数
    kind : IndexKind
        参照先種別

    Returns
    -------
    int
        INDEXサイズ(1,2,4)
    """
    if kind.is_nullable:
        if 128 > count:
            return 1
        elif 128 <= count <= 32767:
            return 2
    else:
        if 256 > count:
            return 1
        elif 256 <= count <= 65535:
            return 2

    return 4


class PmxSetting(BaseModel):
    """
    設定データ列

    Parameters
    ----------
    encoding : Encoding, optional
        エンコード方式 0:UTF16 1:UTF8, by default Encoding.UTF_16_LE
    extended_uv_count : int, optional
        追加UV数 0～4, by default 0
    vertex_index_size : int, optional
        頂点Indexサイズ 1,2,4 のいずれか, by default 1
    texture_index_size : int, optional
        テクスチャIndexサイズ, by default 1
    material_index_size : int, optional
        材質Indexサイズ, by default 1
    bone_index_size : int, optional
        ボーンIndexサイズ, by default 1
    morph_index_size : int, optional
        モーフIndexサイズ, by default 1
    rigidbody_index_size : int, optional
        剛体Indexサイズ, by default 1
    reserved : bytes, optional
        8byteを超えて定義されていた後続データ(そのまま保持して出力する), by default b""
    """

    __slots__ = (
        "encoding",
        "extended_uv_count",
        "vertex_index_size",
        "texture_index_size",
        "material_index_size",
        "bone_index_size",
        "morph_index_size",
        "rigidbody_index_size",
        "reserved",
    )

    def __init__(
        self,
        encoding: Encoding = Encoding.UTF_16_LE,
        extended_uv_count: int = 0,
        vertex_index_size: int = 1,
        texture_index_size: int = 1,
        material_index_size: int = 1,
        bone_index_size: int = 1,
        morph_index_size: int = 1,
        rigidbody_index_size: int = 1,
        reserved: bytes = b"",
    ) -> None:
        super().__init__()
        self.encoding = encoding
        self.extended_uv_count = extended_uv_count
        self.vertex_index_size = vertex_index_size
        self.texture_index_size = texture_index_size
        self.material_index_size = material_index_size
        self.bone_index_size = bone_index_size
        self.morph_index_size = morph_index_size
        self.rigidbody_index_size = rigidbody_index_size
        self.reserved = reserved

    @property
    def index_sizes(self) -> list[int]:
        """IndexKind の並び順でのINDEXサイズ一覧"""
        return [
            self.vertex_index_size,
            self.texture_index_size,
            self.material_index_size,
            self.bone_index_size,
            self.morph_index_size,
            self.rigidbody_index_size,
        ]

    @index_sizes.setter
    def index_sizes(self, sizes: list[int]) -> None:
        (
            self.vertex_index_size,
            self.texture_index_size,
            self.material_index_size,
            self.bone_index_size,
            self.morph_index_size,
            self.rigidbody_index_size,
        ) = sizes

    def index_size(self, kind: IndexKind) -> int:
        return self.index_sizes[kind.value]

    def index_format(self, kind: IndexKind) -> IndexFormat:
        return IndexFormat(kind, self.index_size(kind))

    @property
    def encoding_type(self) -> int:
        for encoding_type, encoding in ENCODING_TYPES.items():
            if encoding == self.encoding:
                return encoding_type
        raise MInvalidSettingException("エンコード方式が不正です: {e}", e=self.encoding)

    @staticmethod
    def to_encoding(encoding_type: int) -> Encoding:
        if encoding_type not in ENCODING_TYPES:
            raise MUnknownEncodingException(
                "エンコード方式が不明です: {e}", e=encoding_type
            )
        return ENCODING_TYPES[encoding_type]

    def check_extended_uv_count(self) -> None:
        if not (0 <= self.extended_uv_count <= MAX_EXTENDED_UV_COUNT):
            raise MInvalidSettingException(
                "追加UV数が範囲外です: {c}", c=self.extended_uv_count
            )

    def check_index_sizes(self) -> None:
        for kind, size in zip(IndexKind, self.index_sizes):
            if size not in INDEX_WIDTHS:
                raise MInvalidIndexWidthException(
                    "INDEXサイズが不正です kind: {k}, width: {w}", k=kind.name, w=size
                )

    def validate(self) -> None:
        """
        出力前の範囲チェック
        範囲外はすべて MInvalidSettingException とする
        """
        _ = self.encoding_type
        self.check_extended_uv_count()
        try:
            self.check_index_sizes()
        except MInvalidIndexWidthException as e:
            raise MInvalidSettingException(e.message) from e

    @classmethod
    def fit(cls, model: "PmxModel") -> "PmxSetting":
        """
        モデルの各要素数から最小のINDEXサイズを持つ設定を生成する
        エンコード方式と追加UV数はモデルの設定を引き継ぐ

        Parameters
        ----------
        model : PmxModel

        Returns
        -------
        PmxSetting
        """
        return cls(
            encoding=model.setting.encoding,
            extended_uv_count=model.setting.extended_uv_count,
            vertex_index_size=define_index_width(len(model.vertices), IndexKind.VERTEX),
            texture_index_size=define_index_width(
                len(model.textures), IndexKind.TEXTURE
            ),
            material_index_size=define_index_width(
                len(model.materials), IndexKind.MATERIAL
            ),
            bone_index_size=define_index_width(len(model.bones), IndexKind.BONE),
            morph_index_size=define_index_width(len(model.morphs), IndexKind.MORPH),
            rigidbody_index_size=define_index_width(
                len(model.rigidbodies), IndexKind.RIGIDBODY
            ),
            reserved=model.setting.reserved,
        )
