from abc import ABC, abstractmethod
from io import BytesIO
from struct import Struct
from typing import BinaryIO, Callable, Generic, NamedTuple, Optional, TypeVar

from pmxlib.core.base import BaseModel, Encoding
from pmxlib.core.exception import (
    MInvalidTextEncodingException,
    MMalformedStringException,
    MTruncatedInputException,
)
from pmxlib.core.math import MQuaternion, MVector3D, MVector4D

TBaseModel = TypeVar("TBaseModel", bound=BaseModel)


class StructUnpackType(NamedTuple):
    unpack: Callable
    size: int


# 固定長の数値フォーマット(全てリトルエンディアン)
BYTE = StructUnpackType(Struct("<B").unpack_from, 1)
USHORT = StructUnpackType(Struct("<H").unpack_from, 2)
INT = StructUnpackType(Struct("<i").unpack_from, 4)
UINT = StructUnpackType(Struct("<I").unpack_from, 4)
FLOAT = StructUnpackType(Struct("<f").unpack_from, 4)
FLOAT3 = StructUnpackType(Struct("<3f").unpack_from, 4 * 3)
FLOAT4 = StructUnpackType(Struct("<4f").unpack_from, 4 * 4)


class BaseReader(Generic[TBaseModel], BaseModel, ABC):
    """
    バイナリ読み込み基底クラス

    読み込み元はバイト列もしくは読み込み可能なストリーム。
    ファイルのオープン・クローズは呼び出し側の責務とする。
    """

    def __init__(self) -> None:
        super().__init__()
        self.fin: BinaryIO = BytesIO()
        self.offset = 0
        self.encoding = Encoding.UTF_16_LE
        # 読み込み中のセクション(エラー時の位置特定用)
        self.section: Optional[str] = None
        self.section_index: Optional[int] = None
        self.read_by_format: dict[type, StructUnpackType] = {}

    def read_by_bytes(self, data: bytes) -> TBaseModel:
        """
        バイト列からモデルを読み込む

        Parameters
        ----------
        data : bytes
            読み込み対象バイト列

        Returns
        -------
        TBaseModel
            読み込んだモデル
        """
        return self.read_by_stream(BytesIO(data))

    def read_by_stream(self, fin: BinaryIO) -> TBaseModel:
        """
        ストリームからモデルを読み込む
        途中で失敗した場合は例外を投げ、モデルは返さない

        Parameters
        ----------
        fin : BinaryIO
            読み込み可能なバイナリストリーム

        Returns
        -------
        TBaseModel
            読み込んだモデル
        """
        self.fin = fin
        self.offset = 0
        self.section = None
        self.section_index = None

        model = self.create_model()
        self.read_by_buffer_header(model)
        self.read_by_buffer(model)

        return model

    @abstractmethod
    def create_model(self) -> TBaseModel:
        pass

    @abstractmethod
    def read_by_buffer_header(self, model: TBaseModel):
        pass

    @abstractmethod
    def read_by_buffer(self, model: TBaseModel):
        pass

    def start_section(self, section: Optional[str]) -> None:
        self.section = section
        self.section_index = None

    def unpack_bytes(self, size: int) -> bytes:
        """
        指定サイズ分のバイト列を読み取る

        Parameters
        ----------
        size : int
            読み取りバイト数

        Returns
        -------
        bytes
        """
        if 0 == size:
            return b""

        data = self.fin.read(size)
        if data is None or len(data) < size:
            raise MTruncatedInputException(
                "データが途中で終わっています 必要バイト数: {s}, 残りバイト数: {r}",
                section=self.section,
                index=self.section_index,
                offset=self.offset,
                s=size,
                r=0 if data is None else len(data),
            )
        self.offset += size
        return data

    def unpack(self, unpack: Callable, size: int) -> tuple:
        """
        バイナリを解凍

        Parameters
        ----------
        unpack : Callable
            Struct.unpack_from
        size : int
            読み取りバイト数

        Returns
        -------
        tuple
            解凍結果
        """
        return unpack(self.unpack_bytes(size))

    def read_value(self, format: StructUnpackType):
        return self.unpack(format.unpack, format.size)[0]

    def read_byte(self) -> int:
        return int(self.read_value(BYTE))

    def read_ushort(self) -> int:
        return int(self.read_value(USHORT))

    def read_int(self) -> int:
        return int(self.read_value(INT))

    def read_uint(self) -> int:
        return int(self.read_value(UINT))

    def read_float(self) -> float:
        return float(self.read_value(FLOAT))

    def read_MVector3D(self) -> MVector3D:
        return MVector3D(*self.unpack(FLOAT3.unpack, FLOAT3.size))

    def read_MVector4D(self) -> MVector4D:
        return MVector4D(*self.unpack(FLOAT4.unpack, FLOAT4.size))

    def read_MQuaternion(self) -> MQuaternion:
        # 並びは x, y, z, w
        x, y, z, w = self.unpack(FLOAT4.unpack, FLOAT4.size)
        return MQuaternion(w, x, y, z)

    def define_encoding(self, encoding: Encoding):
        """
        テキストデータ読み取り時のエンコードを設定する

        Parameters
        ----------
        encoding : Encoding
            エンコード
        """
        self.encoding = encoding

    def read_text(self) -> str:
        """
        4byte(符号なし)のバイト長 + 文字列本体 を読み取る
        """
        text_offset = self.offset
        format_size = self.read_uint()
        if Encoding.UTF_16_LE == self.encoding and format_size % 2:
            raise MMalformedStringException(
                "UTF-16の文字列バイト長が奇数です: {s}",
                section=self.section,
                index=self.section_index,
                offset=text_offset,
                s=format_size,
            )
        btext = self.unpack_bytes(format_size)
        return self.decode_text(self.encoding, btext, text_offset)

    def decode_text(self, encoding: Encoding, btext: bytes, text_offset: int = 0) -> str:
        """
        指定されたエンコードでバイト列を文字列に変換する
        置換文字での補完はせず、変換できない場合はエラーとする

        Parameters
        ----------
        encoding : Encoding
            デコードエンコード
        btext : bytes
            バイト文字列

        Returns
        -------
        str
            デコード済み文字列
        """
        try:
            return btext.decode(encoding.value, errors="strict")
        except UnicodeDecodeError as e:
            raise MInvalidTextEncodingException(
                "文字列のデコードに失敗しました({e}): {b}",
                section=self.section,
                index=self.section_index,
                offset=text_offset,
                e=encoding.value,
                b=btext[:32].hex(),
            ) from e

