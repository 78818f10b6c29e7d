from typing import Optional


class MLibException(Exception):
    """ライブラリ内基本エラー"""

    def __init__(self, message: str = "", *args, **kwargs):
        super().__init__(*args)
        self.message = message.format(**kwargs) if kwargs else message
        self.kwargs = kwargs

    def __str__(self) -> str:
        return self.message


class MCodecException(MLibException):
    """
    バイナリの読み書きに失敗した時のエラー

    Parameters
    ----------
    section : str, optional
        失敗したセクション名
    index : int, optional
        セクション内の要素INDEX
    offset : int, optional
        失敗したバイト位置
    """

    def __init__(
        self,
        message: str = "",
        *args,
        section: Optional[str] = None,
        index: Optional[int] = None,
        offset: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, *args, **kwargs)
        self.section = section
        self.index = index
        self.offset = offset

    def __str__(self) -> str:
        context = []
        if self.section is not None:
            context.append(f"section={self.section}")
        if self.index is not None:
            context.append(f"index={self.index}")
        if self.offset is not None:
            context.append(f"offset={self.offset}")
        if not context:
            return self.message
        return f"{self.message} [{', '.join(context)}]"


class MParseException(MCodecException):
    """ツールがパース出来なかった時のエラー"""


class MTruncatedInputException(MParseException):
    """必要なバイト数を読み取る前にデータが終わった時のエラー"""


class MUnknownEncodingException(MParseException):
    """エンコード方式が不明な時のエラー"""


class MInvalidIndexWidthException(MParseException):
    """INDEXサイズが 1,2,4 以外の時のエラー"""


class MMalformedStringException(MParseException):
    """文字列のバイト長が不正な時のエラー"""


class MInvalidTextEncodingException(MParseException):
    """文字列のデコード・エンコードに失敗した時のエラー"""


class MUnknownVariantTagException(MParseException):
    """種別バイトが定義外の値だった時のエラー"""


class MVariantMismatchException(MUnknownVariantTagException):
    """種別と実データの形が一致しない時のエラー"""


class MInvalidSettingException(MCodecException):
    """設定値が範囲外の時のエラー"""


class MIndexWidthOverflowException(MCodecException):
    """INDEXが設定されたサイズで表現できない時のエラー"""


class MReferentialIntegrityException(MCodecException):
    """読み取ったモデルの参照関係が不正な時のエラー"""
