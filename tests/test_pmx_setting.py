from io import BytesIO

import pytest

from pmxlib.core.base import Encoding
from pmxlib.core.exception import (
    MIndexWidthOverflowException,
    MInvalidIndexWidthException,
    MInvalidSettingException,
    MUnknownEncodingException,
)
from pmxlib.pmx.pmx_collection import PmxModel
from pmxlib.pmx.pmx_part import Bone, Vertex
from pmxlib.pmx.pmx_reader import PmxReader
from pmxlib.pmx.pmx_setting import (
    IndexFormat,
    IndexKind,
    PmxSetting,
    define_index_width,
)
from pmxlib.pmx.pmx_writer import PmxWriter


@pytest.mark.parametrize(
    "count, expected",
    [(0, 1), (255, 1), (256, 2), (65535, 2), (65536, 4)],
)
def test_define_index_width_vertex(count: int, expected: int):
    assert expected == define_index_width(count, IndexKind.VERTEX)


@pytest.mark.parametrize(
    "count, expected",
    [(0, 1), (127, 1), (128, 2), (32767, 2), (32768, 4)],
)
@pytest.mark.parametrize(
    "kind",
    [
        IndexKind.TEXTURE,
        IndexKind.MATERIAL,
        IndexKind.BONE,
        IndexKind.MORPH,
        IndexKind.RIGIDBODY,
    ],
)
def test_define_index_width_nullable(kind: IndexKind, count: int, expected: int):
    assert expected == define_index_width(count, kind)


def test_index_format_invalid_width():
    with pytest.raises(MInvalidIndexWidthException):
        IndexFormat(IndexKind.BONE, 3)


@pytest.mark.parametrize(
    "kind, width, values, overflows",
    [
        (IndexKind.TEXTURE, 1, [-1, 0, 127], [128, -2, -128]),
        (IndexKind.BONE, 2, [-1, 32767], [32768, -5]),
        (IndexKind.MORPH, 4, [-1, 2**31 - 1], [2**31, -(2**31)]),
        (IndexKind.VERTEX, 1, [0, 255], [-1, 256]),
        (IndexKind.VERTEX, 2, [0, 65535], [-1, 65536]),
        (IndexKind.VERTEX, 4, [0, 0xFFFFFFFE], [-1, 0xFFFFFFFF]),
    ],
)
def test_index_format_range(kind: IndexKind, width: int, values, overflows):
    index_format = IndexFormat(kind, width)
    for value in values:
        assert index_format.can_represent(value)
    for value in overflows:
        assert not index_format.can_represent(value)


@pytest.mark.parametrize("width", [1, 2, 4])
def test_no_index_sentinel_bytes(width: int):
    writer = PmxWriter(PmxModel())
    write_index = writer.define_write_index(IndexFormat(IndexKind.TEXTURE, width))
    write_index(-1)
    assert b"\xff" * width == writer.fout.getvalue()

    reader = PmxReader()
    reader.fin = BytesIO(b"\xff" * width)
    read_index, _ = reader.define_read_index(IndexFormat(IndexKind.TEXTURE, width))
    assert -1 == read_index()


def test_vertex_index_is_unsigned():
    reader = PmxReader()
    reader.fin = BytesIO(b"\xff\xff")
    read_index, _ = reader.define_read_index(IndexFormat(IndexKind.VERTEX, 2))
    assert 65535 == read_index()


def test_write_index_overflow():
    writer = PmxWriter(PmxModel())
    writer.start_section("materials")
    writer.section_index = 2
    write_index = writer.define_write_index(IndexFormat(IndexKind.TEXTURE, 1))
    write_index(127)
    with pytest.raises(MIndexWidthOverflowException) as e:
        write_index(128)
    assert "materials" == e.value.section
    assert 2 == e.value.index
    assert 1 == e.value.offset
    assert 128 == e.value.kwargs["v"]


def test_write_negative_index_below_no_index():
    model = PmxModel()
    bone = Bone(name="bone")
    bone.parent_index = -5
    model.bones.append(bone)

    # -1 以外の負数は書き出さない
    with pytest.raises(MIndexWidthOverflowException) as e:
        PmxWriter(model).to_bytes()
    assert "bones" == e.value.section
    assert 0 == e.value.index
    assert -5 == e.value.kwargs["v"]


def test_setting_index_sizes():
    setting = PmxSetting()
    setting.index_sizes = [4, 1, 1, 2, 1, 1]
    assert 4 == setting.vertex_index_size
    assert 2 == setting.bone_index_size
    assert 2 == setting.index_size(IndexKind.BONE)
    assert "h" == setting.index_format(IndexKind.BONE).format
    assert "I" == setting.index_format(IndexKind.VERTEX).format


def test_setting_encoding_type():
    assert 0 == PmxSetting(encoding=Encoding.UTF_16_LE).encoding_type
    assert 1 == PmxSetting(encoding=Encoding.UTF_8).encoding_type
    assert Encoding.UTF_8 == PmxSetting.to_encoding(1)
    with pytest.raises(MUnknownEncodingException):
        PmxSetting.to_encoding(2)


@pytest.mark.parametrize(
    "setting",
    [
        PmxSetting(extended_uv_count=5),
        PmxSetting(extended_uv_count=-1),
        PmxSetting(bone_index_size=3),
        PmxSetting(vertex_index_size=8),
    ],
)
def test_setting_validate(setting: PmxSetting):
    with pytest.raises(MInvalidSettingException):
        setting.validate()


def test_setting_fit():
    model = PmxModel()
    model.setting = PmxSetting(
        encoding=Encoding.UTF_8,
        extended_uv_count=2,
        vertex_index_size=4,
        bone_index_size=4,
        reserved=b"\x09",
    )
    for _ in range(256):
        model.vertices.append(Vertex())
    for _ in range(128):
        model.bones.append(Bone())

    setting = PmxSetting.fit(model)

    assert Encoding.UTF_8 == setting.encoding
    assert 2 == setting.extended_uv_count
    assert [2, 1, 1, 2, 1, 1] == setting.index_sizes
    assert b"\x09" == setting.reserved
    # 元の設定は変更しない
    assert 4 == model.setting.vertex_index_size
