import itertools
from io import BytesIO
from struct import pack

import pytest
from conftest import create_full_model, decode, encode

from pmxlib.core.base import Encoding
from pmxlib.core.exception import (
    MIndexWidthOverflowException,
    MInvalidIndexWidthException,
    MInvalidSettingException,
    MParseException,
    MTruncatedInputException,
    MUnknownEncodingException,
    MUnknownVariantTagException,
    MVariantMismatchException,
)
from pmxlib.core.math import MVector3D
from pmxlib.core.part import Switch
from pmxlib.pmx.pmx_collection import PmxModel
from pmxlib.pmx.pmx_part import (
    Bdef1,
    Bone,
    BoneFlg,
    FlipMorphOffset,
    GroupMorphOffset,
    Ik,
    IkLink,
    Material,
    Morph,
    MorphType,
    ToonSharing,
    Vertex,
)
from pmxlib.pmx.pmx_reader import PmxReader
from pmxlib.pmx.pmx_setting import PmxSetting
from pmxlib.pmx.pmx_writer import PmxWriter

# 空文字列4つまでのヘッダーサイズ
HEADER_SIZE = 4 + 4 + 1 + 8 + 4 * 4


def create_bdef1_model() -> PmxModel:
    model = PmxModel(version=2.0)
    model.setting = PmxSetting(
        encoding=Encoding.UTF_8, vertex_index_size=2, bone_index_size=2
    )
    vertex = Vertex()
    vertex.deform = Bdef1(5)
    model.vertices.append(vertex)
    for n in range(6):
        model.bones.append(Bone(name=f"bone{n}"))
    return model


def test_bdef1_bone_index_bytes():
    data = encode(create_bdef1_model())

    # 頂点数(4) + 位置・法線・UV(32) の後にウェイト変形方式とボーンINDEX
    deform_offset = HEADER_SIZE + 4 + 32
    assert b"\x00\x05\x00" == data[deform_offset : deform_offset + 3]

    model = decode(data)
    assert 5 == model.vertices[0].deform.indexes[0]


@pytest.mark.parametrize("version, size", [(2.0, HEADER_SIZE + 4 * 9), (2.1, HEADER_SIZE + 4 * 10)])
@pytest.mark.parametrize("encoding", [Encoding.UTF_16_LE, Encoding.UTF_8])
def test_empty_model(version: float, size: int, encoding: Encoding):
    model = PmxModel(version=version)
    model.setting.encoding = encoding
    data = encode(model)

    assert size == len(data)
    assert b"PMX " == data[:4]
    assert pack("<f", version) == data[4:8]
    assert bytes([8, encoding == Encoding.UTF_8, 0, 1, 1, 1, 1, 1, 1]) == data[8:17]

    # 頂点・面・テクスチャ・材質の後にボーン数
    bones_offset = HEADER_SIZE + 4 * 4
    assert b"\x00\x00\x00\x00" == data[bones_offset : bones_offset + 4]

    decoded = decode(data)
    assert model == decoded
    assert 0 == len(decoded.bones)
    assert version == decoded.version


def test_full_model_round_trip(full_model: PmxModel):
    data = encode(full_model)
    decoded = decode(data)

    assert full_model == decoded
    assert data == encode(decoded)


@pytest.mark.parametrize(
    "encoding, vertex_size, other_size",
    list(itertools.product([Encoding.UTF_16_LE, Encoding.UTF_8], [1, 2, 4], [1, 2, 4])),
)
def test_round_trip_widths(encoding: Encoding, vertex_size: int, other_size: int):
    model = create_full_model(
        encoding=encoding,
        index_sizes=(vertex_size, other_size, other_size, other_size, other_size, other_size),
    )
    decoded = decode(encode(model))
    assert model == decoded
    assert [vertex_size] + [other_size] * 5 == decoded.setting.index_sizes


@pytest.mark.parametrize("index_sizes", [(4, 1, 2, 4, 1, 2), (2, 4, 1, 1, 2, 4)])
@pytest.mark.parametrize("extended_uv_count", [0, 4])
def test_round_trip_mixed_widths(index_sizes, extended_uv_count: int):
    model = create_full_model(
        encoding=Encoding.UTF_8,
        index_sizes=index_sizes,
        extended_uv_count=extended_uv_count,
    )
    assert model == decode(encode(model))


def test_round_trip_version_20(full_model: PmxModel):
    full_model.version = 2.0
    full_model.soft_bodies = PmxModel().soft_bodies
    data = encode(full_model)
    decoded = decode(data)

    assert 2.0 == decoded.version
    assert full_model == decoded


def test_soft_bodies_in_version_20(full_model: PmxModel):
    full_model.version = 2.0
    with pytest.raises(MInvalidSettingException) as e:
        encode(full_model)
    assert "soft_bodies" == e.value.section


def test_bone_unknown_flags_round_trip():
    model = PmxModel()
    bone = Bone(name="bone")
    bone.bone_flg = BoneFlg.CAN_ROTATE | BoneFlg(0x4000) | BoneFlg(0x8000)
    bone.tail_index = 0
    model.bones.append(bone)

    decoded = decode(encode(model))

    decoded_bone = decoded.bones[0]
    assert 0x4000 | 0x8000 | int(BoneFlg.CAN_ROTATE) == int(decoded_bone.bone_flg)
    assert 0 == decoded_bone.tail_index
    assert BoneFlg.TAIL_IS_BONE in decoded_bone.flag


def test_bone_effect_rotation_only():
    model = create_full_model()
    model.bones[1].effect.is_translation = False
    decoded = decode(encode(model))

    effect = decoded.bones[1].effect
    assert effect.is_rotation
    assert not effect.is_translation
    assert 0.5 == effect.factor


def create_toon_model(
    texture_size: int, toon_sharing_flg: ToonSharing, toon_texture_index: int
) -> PmxModel:
    model = PmxModel()
    model.setting.texture_index_size = texture_size
    material = Material(name="a")
    material.toon_sharing_flg = toon_sharing_flg
    material.toon_texture_index = toon_texture_index
    model.materials.append(material)
    return model


@pytest.mark.parametrize("texture_size", [1, 2, 4])
def test_material_toon_branches(texture_size: int):
    individual = create_toon_model(texture_size, ToonSharing.INDIVIDUAL, -1)
    sharing = create_toon_model(texture_size, ToonSharing.SHARING, 9)

    individual_data = encode(individual)
    sharing_data = encode(sharing)
    # 個別ToonはテクスチャINDEXサイズ、共有Toonは1byte
    assert texture_size - 1 == len(individual_data) - len(sharing_data)

    assert -1 == decode(individual_data).materials["a"].toon_texture_index
    assert 9 == decode(sharing_data).materials["a"].toon_texture_index


def test_fit_setting(full_model: PmxModel):
    full_model.setting.index_sizes = [4, 4, 4, 4, 4, 4]
    fitted = encode(full_model, is_fit_setting=True)

    assert len(fitted) < len(encode(full_model))
    # モデルの設定は変更しない
    assert [4, 4, 4, 4, 4, 4] == full_model.setting.index_sizes

    decoded = decode(fitted)
    assert [1, 1, 1, 1, 1, 1] == decoded.setting.index_sizes
    decoded.setting = full_model.setting
    assert full_model == decoded


def test_setting_reserved_bytes():
    data = encode(PmxModel())
    extended = data[:8] + bytes([10]) + data[9:17] + b"\x01\x02" + data[17:]

    model = decode(extended)
    assert b"\x01\x02" == model.setting.reserved
    assert extended == encode(model)


def test_bad_signature():
    data = encode(PmxModel())
    with pytest.raises(MParseException) as e:
        decode(b"PMD " + data[4:])
    assert "header" == e.value.section


@pytest.mark.parametrize("version", [1.0, 3.0, 2.04, 2.06, 2.2])
def test_bad_version(version: float):
    # 2.0 と 2.1 ちょうど以外は丸めずに弾く
    data = encode(PmxModel())
    with pytest.raises(MParseException) as e:
        decode(data[:4] + pack("<f", version) + data[8:])
    assert "header" == e.value.section
    assert 4 == e.value.offset


def test_setting_size_too_small():
    data = encode(PmxModel())
    with pytest.raises(MInvalidSettingException) as e:
        decode(data[:8] + bytes([7]) + data[9:])
    assert "setting" == e.value.section
    assert 8 == e.value.offset


def test_unknown_encoding():
    data = bytearray(encode(PmxModel()))
    data[9] = 2
    with pytest.raises(MUnknownEncodingException) as e:
        decode(bytes(data))
    assert "setting" == e.value.section


def test_extended_uv_count_out_of_range():
    data = bytearray(encode(PmxModel()))
    data[10] = 5
    with pytest.raises(MInvalidSettingException):
        decode(bytes(data))


def test_invalid_index_width():
    data = bytearray(encode(PmxModel()))
    # ボーンINDEXサイズ
    data[14] = 3
    with pytest.raises(MInvalidIndexWidthException) as e:
        decode(bytes(data))
    assert "setting" == e.value.section


def test_unknown_deform_type():
    data = bytearray(encode(create_bdef1_model()))
    data[HEADER_SIZE + 4 + 32] = 7
    with pytest.raises(MUnknownVariantTagException) as e:
        decode(bytes(data))
    assert "vertices" == e.value.section
    assert 0 == e.value.index


def test_unknown_morph_type():
    # モーフ1つだけのモデルにしてモーフ種類バイトの位置を求める
    model = PmxModel()
    model.setting.encoding = Encoding.UTF_8
    morph = Morph(name="m")
    model.morphs.append(morph)
    data = bytearray(encode(model))

    # モーフ数の後: 名前(4+1) 英名(4) パネル(1) 種類(1)
    morph_type_offset = HEADER_SIZE + 4 * 5 + (4 + 1) + 4 + 1
    assert MorphType.GROUP == data[morph_type_offset]
    data[morph_type_offset] = 11
    with pytest.raises(MUnknownVariantTagException) as e:
        decode(bytes(data))
    assert "morphs" == e.value.section
    assert 0 == e.value.index


def create_ik_model() -> PmxModel:
    model = PmxModel()
    model.setting.encoding = Encoding.UTF_8
    bone = Bone(name="b")
    bone.ik = Ik(bone_index=0)
    bone.ik.links.append(IkLink(0))
    model.bones.append(bone)
    return model


def test_ik_link_angle_limit_round_trip():
    data = encode(create_ik_model())

    # ボーンの後ろは空のモーフ・表示枠・剛体・ジョイント・ソフトボディ数
    angle_limit_offset = len(data) - 4 * 5 - 1
    assert Switch.OFF == data[angle_limit_offset]

    decoded = decode(data)
    assert Switch.OFF == decoded.bones[0].ik.links[0].angle_limit
    assert data == encode(decoded)


def test_unknown_ik_link_angle_limit():
    data = bytearray(encode(create_ik_model()))
    angle_limit_offset = len(data) - 4 * 5 - 1
    data[angle_limit_offset] = 2

    with pytest.raises(MUnknownVariantTagException) as e:
        decode(bytes(data))
    assert "bones" == e.value.section
    assert 0 == e.value.index
    assert 2 == e.value.kwargs["v"]


def test_truncated(full_model: PmxModel):
    data = encode(full_model)
    with pytest.raises(MTruncatedInputException) as e:
        decode(data[:-1])
    assert "soft_bodies" == e.value.section
    assert 0 == e.value.index
    assert len(data) - 1 == e.value.offset


def test_truncated_indices():
    model = PmxModel()
    model.vertices.append(Vertex())
    model.indices = [0, 0, 0]
    data = encode(model)

    # 頂点数(4) + 頂点(32 + 1 + 1 + 4) + 面数(4) の後に頂点INDEX
    indices_offset = HEADER_SIZE + 4 + 38 + 4
    with pytest.raises(MTruncatedInputException) as e:
        decode(data[: indices_offset + 2])
    assert "indices" == e.value.section
    assert 2 == e.value.index
    assert indices_offset + 2 == e.value.offset


def test_truncated_header():
    with pytest.raises(MTruncatedInputException) as e:
        decode(b"PMX ")
    assert "header" == e.value.section


def test_negative_count():
    data = bytearray(encode(PmxModel()))
    data[HEADER_SIZE : HEADER_SIZE + 4] = pack("<i", -1)
    with pytest.raises(MParseException) as e:
        decode(bytes(data))
    assert "vertices" == e.value.section


def test_read_by_stream(full_model: PmxModel):
    model = PmxReader().read_by_stream(BytesIO(encode(full_model)))
    assert full_model == model


def test_save(full_model: PmxModel):
    fout = BytesIO()
    PmxWriter(full_model).save(fout)
    assert encode(full_model) == fout.getvalue()


def test_save_failure_writes_nothing(full_model: PmxModel):
    full_model.materials[0].texture_index = 200
    fout = BytesIO()
    with pytest.raises(MIndexWidthOverflowException) as e:
        PmxWriter(full_model).save(fout)
    assert "materials" == e.value.section
    assert 0 == e.value.index
    assert b"" == fout.getvalue()


def test_invalid_setting_on_write():
    model = PmxModel()
    model.setting.extended_uv_count = 5
    with pytest.raises(MInvalidSettingException) as e:
        encode(model)
    assert "setting" == e.value.section


def test_extended_uv_mismatch(full_model: PmxModel):
    full_model.setting.extended_uv_count = 2
    with pytest.raises(MInvalidSettingException) as e:
        encode(full_model)
    assert "vertices" == e.value.section
    assert 0 == e.value.index


@pytest.mark.parametrize(
    "morph_type, offset",
    [
        (MorphType.VERTEX, GroupMorphOffset(0, 1.0)),
        (MorphType.GROUP, FlipMorphOffset(0, 1.0)),
        (MorphType.FLIP, GroupMorphOffset(0, 1.0)),
    ],
)
def test_morph_variant_mismatch(morph_type: MorphType, offset):
    model = PmxModel()
    morph = Morph(name="mismatch")
    morph.morph_type = morph_type
    morph.offsets = [offset]
    model.morphs.append(morph)

    with pytest.raises(MVariantMismatchException) as e:
        encode(model)
    assert "morphs" == e.value.section
    assert 0 == e.value.index


def test_write_does_not_modify_model(full_model: PmxModel):
    expected = create_full_model()
    encode(full_model, is_fit_setting=True)
    assert expected == full_model


def test_vertex_position_float32():
    model = PmxModel()
    vertex = Vertex()
    vertex.position = MVector3D(0.1, 0, 0)
    model.vertices.append(vertex)

    decoded = decode(encode(model))
    # float32に丸められる
    assert pytest.approx(0.1, abs=1e-6) == decoded.vertices[0].position.x
