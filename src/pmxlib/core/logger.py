import gettext
import logging
import sys
from enum import Enum
from logging import Formatter, StreamHandler
from typing import Optional

import numpy as np


class MLogger:
    class Decoration(Enum):
        IN_BOX = "in_box"
        BOX = "box"
        LINE = "line"

    DEFAULT_FORMAT = "%(message)s"
    STREAM_FORMAT = "%(message)s [%(module)s:%(funcName)s](%(asctime)s)"

    # システム全体のロギングレベル
    total_level = logging.INFO

    # デフォルト翻訳言語
    lang = "en"
    translator: Optional[gettext.NullTranslations] = None
    # i18n配置ディレクトリ
    lang_dir: Optional[str] = None

    def __init__(
        self,
        module_name: str,
        level=logging.INFO,
    ):
        self.file_name = module_name
        self.default_level = level

        # ロガー
        self.logger = logging.getLogger("pmxlib").getChild(self.file_name)
        self.logger.setLevel(level)

    def debug(
        self,
        msg: str,
        *args,
        decoration: Optional[Decoration] = None,
        **kwargs,
    ):
        if self.total_level <= logging.DEBUG and self.default_level <= self.total_level:
            add_mlogger_handler(self)
            self.logger.info(
                self.create_message(msg, logging.DEBUG, None, decoration, **kwargs)
            )

    def info(
        self,
        msg: str,
        *args,
        title: Optional[str] = None,
        decoration: Optional[Decoration] = None,
        **kwargs,
    ):
        add_mlogger_handler(self)
        self.logger.info(
            self.create_message(msg, logging.INFO, title, decoration, **kwargs)
        )

    # ログレベルカウント
    def count(
        self,
        msg: str,
        index: int,
        total_index_count: int,
        display_block: int,
        *args,
        title: Optional[str] = None,
        decoration: Optional[Decoration] = None,
        **kwargs,
    ):
        if 0 < total_index_count and (
            0 == index % display_block or index == total_index_count
        ):
            add_mlogger_handler(self)

            percentage = (index / total_index_count) * 100
            log_msg = "-- " + self.get_text(msg) + " [{i} ({p:.2f}%)]"
            self.logger.debug(
                self.create_message(
                    log_msg,
                    logging.INFO,
                    title,
                    decoration,
                    p=percentage,
                    i=index,
                    **kwargs,
                )
            )

    def warning(
        self,
        msg: str,
        *args,
        title: Optional[str] = None,
        decoration: Optional[Decoration] = None,
        **kwargs,
    ):
        add_mlogger_handler(self)
        self.logger.warning(
            self.create_message(msg, logging.WARNING, title, decoration, **kwargs)
        )

    def error(
        self,
        msg: str,
        *args,
        title: Optional[str] = None,
        decoration: Optional[Decoration] = None,
        **kwargs,
    ):
        add_mlogger_handler(self)
        self.logger.error(
            self.create_message(msg, logging.ERROR, title, decoration, **kwargs)
        )

    def critical(
        self,
        msg: str,
        *args,
        title: Optional[str] = None,
        decoration: Optional[Decoration] = None,
        **kwargs,
    ):
        add_mlogger_handler(self)
        self.logger.critical(
            self.create_message(
                msg,
                logging.CRITICAL,
                title,
                decoration or MLogger.Decoration.BOX,
                **kwargs,
            ),
            exc_info=True,
            stack_info=True,
        )

    def get_text(self, text: str, **kwargs) -> str:
        """指定された文字列の翻訳結果を取得する"""
        if not self.translator:
            if kwargs:
                return text.format(**kwargs)
            return text

        # 翻訳結果を取得する
        trans_text = self.translator.gettext(text)
        if kwargs:
            return str(trans_text.format(**kwargs))
        return trans_text

    # 実際に出力する実態
    def create_message(
        self,
        msg: str,
        level: int,
        title: Optional[str] = None,
        decoration: Optional["MLogger.Decoration"] = None,
        **kwargs,
    ) -> str:
        # 翻訳結果を取得する
        if logging.DEBUG < level:
            trans_msg = self.get_text(msg, **kwargs)
        else:
            # デバッグメッセージはそのまま変換だけ
            trans_msg = str(msg.format(**kwargs)) if kwargs else msg

        if decoration == MLogger.Decoration.BOX:
            return self.create_box_message(trans_msg, level, title)
        elif decoration == MLogger.Decoration.LINE:
            return self.create_line_message(trans_msg, level, title)
        elif decoration == MLogger.Decoration.IN_BOX:
            return self.create_in_box_message(trans_msg, level, title)

        return trans_msg

    def create_box_message(self, msg, level, title=None) -> str:
        msg_block = []
        msg_block.append("■■■■■■■■■■■■■■■■■")

        if level == logging.CRITICAL:
            msg_block.append("■　** CRITICAL **  ")

        elif level == logging.ERROR:
            msg_block.append("■　** ERROR **  ")

        elif level == logging.WARNING:
            msg_block.append("■　** WARNING **  ")

        elif logging.INFO >= level and title:
            msg_block.append(f"■　** {title} **  ")

        msg_block.extend([f"■　{msg_line}" for msg_line in msg.split("\n")])
        msg_block.append("■■■■■■■■■■■■■■■■■")

        return "\n".join(msg_block)

    def create_line_message(self, msg, level, title=None) -> str:
        msg_block = [
            f"■ {msg_line} --------------------" for msg_line in msg.split("\n")
        ]
        return "\n".join(msg_block)

    def create_in_box_message(self, msg, level, title=None) -> str:
        msg_block = [f"■　{msg_line}" for msg_line in msg.split("\n")]
        return "\n".join(msg_block)

    @classmethod
    def initialize(
        cls,
        lang: str,
        root_dir: str,
        level=logging.INFO,
    ):
        logging.basicConfig(level=level, format=cls.STREAM_FORMAT)
        cls.total_level = level
        cls.lang = lang
        cls.lang_dir = f"{root_dir}/i18n"

        # 翻訳用クラスの設定
        cls.translator = gettext.translation(
            "messages",  # domain: 辞書ファイルの名前
            localedir=cls.lang_dir,  # 辞書ファイル配置ディレクトリ
            languages=[lang],  # 翻訳に使用する言語
            fallback=True,  # .moファイルが見つからなかった時は未翻訳の文字列を出力
        )


def add_mlogger_handler(logger: MLogger) -> None:
    if logger.logger.handlers:
        return

    stream_err_handler = StreamHandler(sys.stderr)
    stream_err_handler.setFormatter(Formatter(logger.STREAM_FORMAT))
    logger.logger.addHandler(stream_err_handler)


def parse2str(obj: object) -> str:
    """オブジェクトの変数の名前と値の一覧を文字列で返す

    Parameters
    ----------
    obj : object

    Returns
    -------
    str
        変数リスト文字列
        Sample[x=2, a=sss, child=ChildSample[y=4.5, b=xyz]]
    """
    from pmxlib.core.base import attribute_items

    return f"{obj.__class__.__name__}[{', '.join([f'{k}={round_str(v)}' for k, v in attribute_items(obj)])}]"


def round_str(v: object, decimals=5) -> str:
    """
    丸め処理付き文字列変換処理

    小数だったら丸めて一定桁数までしか出力しない
    """
    if isinstance(v, float):
        return f"{round(v, decimals)}"
    elif isinstance(v, np.ndarray):
        return f"{np.round(v, decimals)}"
    else:
        return f"{v}"
