import struct
from enum import Enum
from io import BytesIO
from typing import BinaryIO, Optional

from pmxlib.core.base import BaseModel, Encoding
from pmxlib.core.exception import MCodecException, MInvalidTextEncodingException
from pmxlib.core.math import MQuaternion, MVector


class BinaryType(str, Enum):
    FLOAT = "<f"
    UNSIGNED_BYTE = "<B"
    UNSIGNED_SHORT = "<H"
    INT = "<i"
    UNSIGNED_INT = "<I"


class BaseWriter(BaseModel):
    """
    バイナリ書き込み基底クラス

    書き込みはいったんメモリ上のバッファに行い、全体の出力に成功した時だけ
    出力先に書き出す
    """

    def __init__(self) -> None:
        super().__init__()
        self.fout: BinaryIO = BytesIO()
        self.encoding = Encoding.UTF_16_LE
        # 書き込み中のセクション(エラー時の位置特定用)
        self.section: Optional[str] = None
        self.section_index: Optional[int] = None

    def start_section(self, section: Optional[str]) -> None:
        self.section = section
        self.section_index = None

    @property
    def offset(self) -> int:
        return self.fout.tell()

    def write_bytes(self, data: bytes) -> None:
        self.fout.write(data)

    def write_number(self, val_type: BinaryType, val: float) -> None:
        """
        数値出力

        Parameters
        ----------
        val_type : BinaryType
        val : float
            出力数字
        """
        try:
            if val_type == BinaryType.FLOAT:
                self.fout.write(struct.pack(val_type.value, float(val)))
            else:
                self.fout.write(struct.pack(val_type.value, int(val)))
        except (struct.error, OverflowError) as e:
            raise MCodecException(
                "数値出力に失敗しました type: {t}, val: {v}",
                section=self.section,
                index=self.section_index,
                offset=self.offset,
                t=val_type.name,
                v=val,
            ) from e

    def write_byte(self, val: int) -> None:
        """符号なしBYTEの出力"""
        self.write_number(BinaryType.UNSIGNED_BYTE, val)

    def write_ushort(self, val: int) -> None:
        self.write_number(BinaryType.UNSIGNED_SHORT, val)

    def write_int(self, val: int) -> None:
        self.write_number(BinaryType.INT, val)

    def write_uint(self, val: int) -> None:
        self.write_number(BinaryType.UNSIGNED_INT, val)

    def write_float(self, val: float) -> None:
        self.write_number(BinaryType.FLOAT, val)

    def write_MVector(self, v: MVector) -> None:
        for val in v:
            self.write_float(val)

    def write_MQuaternion(self, qq: MQuaternion) -> None:
        # 並びは x, y, z, w
        for val in (qq.x, qq.y, qq.z, qq.scalar):
            self.write_float(val)

    def define_encoding(self, encoding: Encoding):
        self.encoding = encoding

    def write_text(self, text: str) -> None:
        """
        文字列出力
        4byte(符号なし)のバイト長 + 文字列本体

        Parameters
        ----------
        text : str
            出力文字列
        """
        try:
            btxt = text.encode(self.encoding.value, errors="strict")
        except UnicodeEncodeError as e:
            raise MInvalidTextEncodingException(
                "文字列のエンコードに失敗しました({e}): {t}",
                section=self.section,
                index=self.section_index,
                offset=self.offset,
                e=self.encoding.value,
                t=repr(text),
            ) from e
        self.write_uint(len(btxt))
        self.write_bytes(btxt)
