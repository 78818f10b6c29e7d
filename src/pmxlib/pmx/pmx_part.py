from abc import ABC, abstractmethod
from enum import IntEnum, IntFlag, unique
from typing import Optional, Union

import numpy as np

from pmxlib.core.base import BaseModel
from pmxlib.core.math import MQuaternion, MVector2D, MVector3D, MVector4D
from pmxlib.core.part import BaseIndexModel, BaseIndexNameModel, Switch


@unique
class DeformType(IntEnum):
    """ウェイト変形方式"""

    BDEF1 = 0
    """0:BDEF1"""
    BDEF2 = 1
    """1:BDEF2"""
    BDEF4 = 2
    """2:BDEF4"""
    SDEF = 3
    """3:SDEF"""
    QDEF = 4
    """4:QDEF"""


class Deform(BaseModel, ABC):
    """
    デフォーム基底クラス

    ウェイトは読み込んだ値をそのまま保持し、正規化や補完は行わない

    Parameters
    ----------
    indexes : list[int]
        ボーンINDEXリスト
    weights : list[float]
        ウェイトリスト
    count : int
        デフォームボーン個数
    """

    __slots__ = (
        "indexes",
        "weights",
        "count",
    )

    def __init__(self, indexes: list[int], weights: list[float], count: int):
        super().__init__()
        self.indexes = np.array(indexes, dtype=np.int64)
        self.weights = np.array(weights, dtype=np.float32)
        self.count: int = count

    @abstractmethod
    def type(self) -> DeformType:
        """
        デフォームタイプ
        """
        pass


class Bdef1(Deform):
    def __init__(self, index0: int):
        super().__init__([index0], [1.0], 1)

    def type(self) -> DeformType:
        return DeformType.BDEF1


class Bdef2(Deform):
    """
    BDEF2

    ボーン1のウェイト(1 - weight0)は保持しない
    """

    def __init__(self, index0: int, index1: int, weight0: float):
        super().__init__([index0, index1], [weight0], 2)

    def type(self) -> DeformType:
        return DeformType.BDEF2


class Bdef4(Deform):
    def __init__(
        self,
        index0: int,
        index1: int,
        index2: int,
        index3: int,
        weight0: float,
        weight1: float,
        weight2: float,
        weight3: float,
    ):
        super().__init__(
            [index0, index1, index2, index3], [weight0, weight1, weight2, weight3], 4
        )

    def type(self) -> DeformType:
        return DeformType.BDEF4


class Qdef(Bdef4):
    """デュアルクォータニオン変形(形式はBDEF4と同じ)"""

    def type(self) -> DeformType:
        return DeformType.QDEF


class Sdef(Deform):
    __slots__ = (
        "sdef_c",
        "sdef_r0",
        "sdef_r1",
    )

    def __init__(
        self,
        index0: int,
        index1: int,
        weight0: float,
        sdef_c: MVector3D,
        sdef_r0: MVector3D,
        sdef_r1: MVector3D,
    ):
        super().__init__([index0, index1], [weight0], 2)
        self.sdef_c = sdef_c
        self.sdef_r0 = sdef_r0
        self.sdef_r1 = sdef_r1

    def type(self) -> DeformType:
        return DeformType.SDEF


TDeform = Union[Bdef1, Bdef2, Bdef4, Sdef, Qdef]


class Vertex(BaseIndexModel):
    """
    頂点

    Parameters
    ----------
    position : MVector3D, optional
        頂点位置, by default MVector3D()
    normal : MVector3D, optional
        頂点法線, by default MVector3D()
    uv : MVector2D, optional
        UV, by default MVector2D()
    extended_uvs : list[MVector4D], optional
        追加UV(設定の追加UV数と同じ数だけ持つ), by default []
    deform : Deform, optional
        デフォーム, by default Bdef1(-1)
    edge_factor : float, optional
        エッジ倍率, by default 0
    """

    __slots__ = (
        "position",
        "normal",
        "uv",
        "extended_uvs",
        "deform",
        "edge_factor",
    )

    def __init__(
        self,
        index: int = -1,
    ):
        super().__init__(index=index)
        self.position = MVector3D()
        self.normal = MVector3D()
        self.uv = MVector2D()
        self.extended_uvs: list[MVector4D] = []
        self.deform: TDeform = Bdef1(-1)
        self.edge_factor = 0.0

    @property
    def deform_type(self) -> DeformType:
        """ウェイト変形方式(保持しているデフォームから決まる)"""
        return self.deform.type()


class Texture(BaseIndexNameModel):
    """
    テクスチャ

    name にテクスチャパスをそのまま保持する(パスの解決はしない)
    """

    def __init__(self, index: int = -1, name: str = ""):
        super().__init__(index=index, name=name)


@unique
class SphereMode(IntEnum):
    """スフィアモード"""

    INVALID = 0
    """0:無効"""
    MULTIPLICATION = 1
    """1:乗算(sph)"""
    ADDITION = 2
    """2:加算(spa)"""
    SUBTEXTURE = 3
    """3:サブテクスチャ(追加UV1のx,yをUV参照して通常テクスチャ描画を行う)"""


class DrawFlg(IntFlag):
    """描画フラグ"""

    NONE = 0x0000
    """"初期値"""
    DOUBLE_SIDED_DRAWING = 0x0001
    """0x01:両面描画"""
    GROUND_SHADOW = 0x0002
    """0x02:地面影"""
    DRAWING_ON_SELF_SHADOW_MAPS = 0x0004
    """0x04:セルフシャドウマップへの描画"""
    DRAWING_SELF_SHADOWS = 0x0008
    """0x08:セルフシャドウの描画"""
    DRAWING_EDGE = 0x0010
    """0x10:エッジ描画"""
    VERTEX_COLOR = 0x0020
    """0x20:頂点色(2.1)"""
    POINT_DRAWING = 0x0040
    """0x40:Point描画(2.1)"""
    LINE_DRAWING = 0x0080
    """0x80:Line描画(2.1)"""


@unique
class ToonSharing(IntEnum):
    """共有Toonフラグ"""

    INDIVIDUAL = 0
    """0:継続値は個別Toon"""
    SHARING = 1
    """1:継続値は共有Toon"""


class Material(BaseIndexNameModel):
    """
    材質

    Parameters
    ----------
    name : str, optional
        材質名, by default ""
    english_name : str, optional
        材質名英, by default ""
    diffuse : MVector4D, optional
        Diffuse (R,G,B,A)(拡散色＋非透過度), by default MVector4D()
    specular : MVector3D, optional
        Specular (R,G,B)(反射色), by default MVector3D()
    specular_factor : float, optional
        Specular係数(反射強度), by default 0
    ambient : MVector3D, optional
        Ambient (R,G,B)(環境色), by default MVector3D()
    draw_flg : DrawFlg, optional
        描画フラグ(8bit) - 各bit 0:OFF 1:ON, by default DrawFlg.NONE
    edge_color : MVector4D, optional
        エッジ色 (R,G,B,A), by default MVector4D()
    edge_size : float, optional
        エッジサイズ, by default 0
    texture_index : int, optional
        通常テクスチャINDEX, by default -1
    sphere_texture_index : int, optional
        スフィアテクスチャINDEX, by default -1
    sphere_mode : SphereMode, optional
        スフィアモード 0:無効 1:乗算(sph) 2:加算(spa) 3:サブテクスチャ, by default INVALID
    toon_sharing_flg : ToonSharing, optional
        共有Toonフラグ 0:継続値は個別Toon 1:継続値は共有Toon, by default SHARING
    toon_texture_index : int, optional
        個別Toonの場合はテクスチャINDEX、共有Toonの場合は共有Toonの番号(0～9), by default 0
    comment : str, optional
        メモ, by default ""
    vertices_count : int, optional
        材質に対応する面(頂点)数 (必ず3の倍数になる), by default 0
    """

    __slots__ = (
        "diffuse",
        "specular",
        "specular_factor",
        "ambient",
        "draw_flg",
        "edge_color",
        "edge_size",
        "texture_index",
        "sphere_texture_index",
        "sphere_mode",
        "toon_sharing_flg",
        "toon_texture_index",
        "comment",
        "vertices_count",
    )

    def __init__(
        self,
        index: int = -1,
        name: str = "",
        english_name: str = "",
    ):
        super().__init__(index=index, name=name, english_name=english_name)
        self.diffuse = MVector4D()
        self.specular = MVector3D()
        self.specular_factor = 0.0
        self.ambient = MVector3D()
        self.draw_flg = DrawFlg.NONE
        self.edge_color = MVector4D()
        self.edge_size = 0.0
        self.texture_index = -1
        self.sphere_texture_index = -1
        self.sphere_mode = SphereMode.INVALID
        self.toon_sharing_flg = ToonSharing.SHARING
        self.toon_texture_index = 0
        self.comment = ""
        self.vertices_count = 0


class BoneFlg(IntFlag):
    """ボーンフラグ"""

    NONE = 0x0000
    """"初期値"""
    TAIL_IS_BONE = 0x0001
    """接続先(PMD子ボーン指定)表示方法 -> 0:座標オフセットで指定 1:ボーンで指定"""
    CAN_ROTATE = 0x0002
    """回転可能"""
    CAN_TRANSLATE = 0x0004
    """移動可能"""
    IS_VISIBLE = 0x0008
    """表示"""
    CAN_MANIPULATE = 0x0010
    """操作可"""
    IS_IK = 0x0020
    """IK"""
    IS_EXTERNAL_LOCAL = 0x0080
    """ローカル付与 | 付与対象 0:ユーザー変形値／IKリンク／多重付与 1:親のローカル変形量"""
    IS_EXTERNAL_ROTATION = 0x0100
    """回転付与"""
    IS_EXTERNAL_TRANSLATION = 0x0200
    """移動付与"""
    HAS_FIXED_AXIS = 0x0400
    """軸固定"""
    HAS_LOCAL_COORDINATE = 0x0800
    """ローカル軸"""
    IS_AFTER_PHYSICS_DEFORM = 0x1000
    """物理後変形"""
    IS_EXTERNAL_PARENT_DEFORM = 0x2000
    """外部親変形"""


# 後続データの有無を決めるフラグ(ボーンの各グループから求める)
BONE_FIELD_FLAGS = (
    BoneFlg.TAIL_IS_BONE
    | BoneFlg.IS_IK
    | BoneFlg.IS_EXTERNAL_ROTATION
    | BoneFlg.IS_EXTERNAL_TRANSLATION
    | BoneFlg.HAS_FIXED_AXIS
    | BoneFlg.HAS_LOCAL_COORDINATE
    | BoneFlg.IS_EXTERNAL_PARENT_DEFORM
)


class IkLink(BaseModel):
    """
    IKリンク

    Parameters
    ----------
    bone_index : int, optional
        リンクボーンのボーンIndex, by default -1
    angle_limit : Switch, optional
        角度制限 0:OFF 1:ON, by default Switch.OFF
    min_angle_limit : MVector3D, optional
        下限 (x,y,z) -> ラジアン角, by default MVector3D()
    max_angle_limit : MVector3D, optional
        上限 (x,y,z) -> ラジアン角, by default MVector3D()
    """

    __slots__ = (
        "bone_index",
        "angle_limit",
        "min_angle_limit",
        "max_angle_limit",
    )

    def __init__(
        self,
        bone_index: int = -1,
    ) -> None:
        super().__init__()
        self.bone_index = bone_index
        self.angle_limit = Switch.OFF
        self.min_angle_limit = MVector3D()
        self.max_angle_limit = MVector3D()

    def __bool__(self) -> bool:
        return 0 <= self.bone_index


class Ik(BaseModel):
    """
    IK

    Parameters
    ----------
    bone_index : int, optional
        IKターゲットボーンのボーンIndex, by default -1
    loop_count : int, optional
        IKループ回数, by default 0
    unit_rotation : float, optional
        IKループ計算時の1回あたりの制限角度 -> ラジアン角, by default 0
    links : list[IkLink], optional
        IKリンクリスト, by default []
    """

    __slots__ = (
        "bone_index",
        "loop_count",
        "unit_rotation",
        "links",
    )

    def __init__(self, bone_index: int = -1) -> None:
        super().__init__()
        self.bone_index = bone_index
        self.loop_count = 0
        self.unit_rotation = 0.0
        self.links: list[IkLink] = []

    def __bool__(self) -> bool:
        return 0 <= self.bone_index


class BoneEffect(BaseModel):
    """
    付与

    Parameters
    ----------
    index : int
        付与親ボーンのボーンIndex
    factor : float
        付与率
    is_rotation : bool
        回転付与
    is_translation : bool
        移動付与
    """

    __slots__ = (
        "index",
        "factor",
        "is_rotation",
        "is_translation",
    )

    def __init__(
        self,
        index: int = -1,
        factor: float = 0.0,
        is_rotation: bool = True,
        is_translation: bool = False,
    ) -> None:
        super().__init__()
        self.index = index
        self.factor = factor
        self.is_rotation = is_rotation
        self.is_translation = is_translation


class BoneLocalAxis(BaseModel):
    """ローカル軸"""

    __slots__ = ("x_vector", "z_vector")

    def __init__(
        self,
        x_vector: Optional[MVector3D] = None,
        z_vector: Optional[MVector3D] = None,
    ) -> None:
        super().__init__()
        self.x_vector = x_vector or MVector3D(1, 0, 0)
        self.z_vector = z_vector or MVector3D(0, 0, 1)


class Bone(BaseIndexNameModel):
    """
    ボーン

    後続データの有無を決めるフラグは各グループ(tail_index, effect, fixed_axis,
    local_axis, external_key, ik)の有無で表し、bone_flg にはそれ以外のフラグのみ持つ

    Parameters
    ----------
    name : str, optional
        ボーン名, by default ""
    english_name : str, optional
        ボーン名英, by default ""
    position : MVector3D, optional
        位置, by default MVector3D()
    parent_index : int, optional
        親ボーンのボーンIndex, by default -1
    layer : int, optional
        変形階層, by default 0
    bone_flg : BoneFlg, optional
        ボーンフラグ(後続データに関係しないもの), by default BoneFlg.NONE
    tail_position : MVector3D, optional
        接続先がボーンでない場合の座標オフセット, by default MVector3D()
    tail_index : Optional[int], optional
        接続先ボーンのボーンIndex, by default None
    effect : Optional[BoneEffect], optional
        回転付与・移動付与, by default None
    fixed_axis : Optional[MVector3D], optional
        軸固定の場合 軸の方向ベクトル, by default None
    local_axis : Optional[BoneLocalAxis], optional
        ローカル軸の場合 X軸・Z軸の方向ベクトル, by default None
    external_key : Optional[int], optional
        外部親変形の場合 Key値, by default None
    ik : Optional[Ik], optional
        IKの場合 IKデータを格納, by default None
    """

    __slots__ = (
        "position",
        "parent_index",
        "layer",
        "bone_flg",
        "tail_position",
        "tail_index",
        "effect",
        "fixed_axis",
        "local_axis",
        "external_key",
        "ik",
    )

    def __init__(
        self,
        index: int = -1,
        name: str = "",
        english_name: str = "",
    ):
        super().__init__(index=index, name=name, english_name=english_name)
        self.position = MVector3D()
        self.parent_index = -1
        self.layer = 0
        self.bone_flg = BoneFlg.NONE
        self.tail_position = MVector3D()
        self.tail_index: Optional[int] = None
        self.effect: Optional[BoneEffect] = None
        self.fixed_axis: Optional[MVector3D] = None
        self.local_axis: Optional[BoneLocalAxis] = None
        self.external_key: Optional[int] = None
        self.ik: Optional[Ik] = None

    @property
    def flag(self) -> BoneFlg:
        """出力用のボーンフラグ(各グループの有無からフラグを再構成する)"""
        flg = BoneFlg(int(self.bone_flg) & ~int(BONE_FIELD_FLAGS))
        if self.tail_index is not None:
            flg |= BoneFlg.TAIL_IS_BONE
        if self.ik is not None:
            flg |= BoneFlg.IS_IK
        if self.effect is not None:
            if self.effect.is_rotation:
                flg |= BoneFlg.IS_EXTERNAL_ROTATION
            if self.effect.is_translation:
                flg |= BoneFlg.IS_EXTERNAL_TRANSLATION
        if self.fixed_axis is not None:
            flg |= BoneFlg.HAS_FIXED_AXIS
        if self.local_axis is not None:
            flg |= BoneFlg.HAS_LOCAL_COORDINATE
        if self.external_key is not None:
            flg |= BoneFlg.IS_EXTERNAL_PARENT_DEFORM
        return flg

    @property
    def has_effect(self) -> bool:
        """付与親データを出力するか(回転付与・移動付与のいずれかがONの場合のみ)"""
        return self.effect is not None and (
            self.effect.is_rotation or self.effect.is_translation
        )

    @property
    def is_tail_bone(self) -> bool:
        """表示先がボーンであるか"""
        return self.tail_index is not None

    @property
    def can_rotate(self) -> bool:
        """回転可能であるか"""
        return BoneFlg.CAN_ROTATE in self.bone_flg

    @property
    def can_translate(self) -> bool:
        """移動可能であるか"""
        return BoneFlg.CAN_TRANSLATE in self.bone_flg

    @property
    def is_visible(self) -> bool:
        """表示であるか"""
        return BoneFlg.IS_VISIBLE in self.bone_flg

    @property
    def can_manipulate(self) -> bool:
        """操作可であるか"""
        return BoneFlg.CAN_MANIPULATE in self.bone_flg

    @property
    def is_ik(self) -> bool:
        """IKであるか"""
        return self.ik is not None

    @property
    def is_external_local(self) -> bool:
        """ローカル付与であるか"""
        return BoneFlg.IS_EXTERNAL_LOCAL in self.bone_flg

    @property
    def is_after_physics_deform(self) -> bool:
        """物理後変形であるか"""
        return BoneFlg.IS_AFTER_PHYSICS_DEFORM in self.bone_flg


class MorphOffset(BaseModel):
    """モーフオフセット基底クラス"""

    def __init__(self) -> None:
        super().__init__()


class VertexMorphOffset(MorphOffset):
    """
    頂点モーフ

    Parameters
    ----------
    vertex_index : int
        頂点INDEX
    position : MVector3D
        座標オフセット量(x,y,z)
    """

    __slots__ = ("vertex_index", "position")

    def __init__(self, vertex_index: int, position: MVector3D):
        super().__init__()
        self.vertex_index = vertex_index
        self.position = position


class UvMorphOffset(MorphOffset):
    """
    UVモーフ

    Parameters
    ----------
    vertex_index : int
        頂点INDEX
    uv : MVector4D
        UVオフセット量(x,y,z,w) ※通常UVはz,wが不要項目になるがモーフとしてのデータ値は記録しておく
    """

    __slots__ = ("vertex_index", "uv")

    def __init__(self, vertex_index: int, uv: MVector4D):
        super().__init__()
        self.vertex_index = vertex_index
        self.uv = uv


class BoneMorphOffset(MorphOffset):
    """
    ボーンモーフ

    Parameters
    ----------
    bone_index : int
        ボーンIndex
    position : MVector3D
        移動量(x,y,z)
    qq : MQuaternion
        回転量-クォータニオン(x,y,z,w)
    """

    __slots__ = ("bone_index", "position", "qq")

    def __init__(
        self,
        bone_index: int,
        position: Optional[MVector3D] = None,
        qq: Optional[MQuaternion] = None,
    ):
        super().__init__()
        self.bone_index = bone_index
        self.position = position or MVector3D()
        self.qq = qq or MQuaternion()


class GroupMorphOffset(MorphOffset):
    """
    グループモーフ

    Parameters
    ----------
    morph_index : int
        モーフINDEX
    morph_factor : float
        モーフ変動量
    """

    __slots__ = ("morph_index", "morph_factor")

    def __init__(self, morph_index: int, morph_factor: float):
        super().__init__()
        self.morph_index = morph_index
        self.morph_factor = morph_factor


class FlipMorphOffset(GroupMorphOffset):
    """
    フリップモーフ(形式はグループモーフと同じ)
    """


@unique
class MaterialMorphCalcMode(IntEnum):
    """材質モーフ：計算モード"""

    MULTIPLICATION = 0
    """0:乗算"""
    ADDITION = 1
    """1:加算"""


class MaterialMorphOffset(MorphOffset):
    """
    材質モーフ

    Parameters
    ----------
    material_index : int
        材質Index -> -1:全材質対象
    calc_mode : CalcMode
        0:乗算, 1:加算
    diffuse : MVector4D
        Diffuse (R,G,B,A)
    specular : MVector3D
        Specular (R,G,B)
    specular_factor : float
        Specular係数
    ambient : MVector3D
        Ambient (R,G,B)
    edge_color : MVector4D
        エッジ色 (R,G,B,A)
    edge_size : float
        エッジサイズ
    texture_factor : MVector4D
        テクスチャ係数 (R,G,B,A)
    sphere_texture_factor : MVector4D
        スフィアテクスチャ係数 (R,G,B,A)
    toon_texture_factor : MVector4D
        Toonテクスチャ係数 (R,G,B,A)
    """

    __slots__ = (
        "material_index",
        "calc_mode",
        "diffuse",
        "specular",
        "specular_factor",
        "ambient",
        "edge_color",
        "edge_size",
        "texture_factor",
        "sphere_texture_factor",
        "toon_texture_factor",
    )

    def __init__(
        self,
        material_index: int,
        calc_mode: MaterialMorphCalcMode,
        diffuse: MVector4D,
        specular: MVector3D,
        specular_factor: float,
        ambient: MVector3D,
        edge_color: MVector4D,
        edge_size: float,
        texture_factor: MVector4D,
        sphere_texture_factor: MVector4D,
        toon_texture_factor: MVector4D,
    ):
        super().__init__()
        self.material_index = material_index
        self.calc_mode = calc_mode
        self.diffuse = diffuse
        self.specular = specular
        self.specular_factor = specular_factor
        self.ambient = ambient
        self.edge_color = edge_color
        self.edge_size = edge_size
        self.texture_factor = texture_factor
        self.sphere_texture_factor = sphere_texture_factor
        self.toon_texture_factor = toon_texture_factor


class ImpulseMorphOffset(MorphOffset):
    """
    インパルスモーフ

    Parameters
    ----------
    rigidbody_index : int
        剛体Index
    local_flg : Switch
        ローカルフラグ 0:OFF 1:ON
    velocity : MVector3D
        移動速度(x,y,z)
    torque : MVector3D
        回転トルク(x,y,z)
    """

    __slots__ = ("rigidbody_index", "local_flg", "velocity", "torque")

    def __init__(
        self,
        rigidbody_index: int,
        local_flg: Switch,
        velocity: MVector3D,
        torque: MVector3D,
    ):
        super().__init__()
        self.rigidbody_index = rigidbody_index
        self.local_flg = local_flg
        self.velocity = velocity
        self.torque = torque


@unique
class MorphPanel(IntEnum):
    """操作パネル"""

    SYSTEM = 0
    """0:システム予約"""
    EYEBROW_LOWER_LEFT = 1
    """1:眉(左下)"""
    EYE_UPPER_LEFT = 2
    """2:目(左上)"""
    LIP_UPPER_RIGHT = 3
    """3:口(右上)"""
    OTHER_LOWER_RIGHT = 4
    """4:その他(右下)"""


@unique
class MorphType(IntEnum):
    """モーフ種類"""

    GROUP = 0
    """0:グループ"""
    VERTEX = 1
    """1:頂点"""
    BONE = 2
    """2:ボーン"""
    UV = 3
    """3:UV"""
    EXTENDED_UV1 = 4
    """4:追加UV1"""
    EXTENDED_UV2 = 5
    """5:追加UV2"""
    EXTENDED_UV3 = 6
    """6:追加UV3"""
    EXTENDED_UV4 = 7
    """7:追加UV4"""
    MATERIAL = 8
    """"8:材質"""
    FLIP = 9
    """9:フリップ(2.1)"""
    IMPULSE = 10
    """10:インパルス(2.1)"""


TMorphOffset = Union[
    VertexMorphOffset,
    UvMorphOffset,
    BoneMorphOffset,
    GroupMorphOffset,
    MaterialMorphOffset,
    FlipMorphOffset,
    ImpulseMorphOffset,
]

# モーフ種類ごとのオフセットの型
MORPH_OFFSET_TYPES: dict[MorphType, type] = {
    MorphType.GROUP: GroupMorphOffset,
    MorphType.VERTEX: VertexMorphOffset,
    MorphType.BONE: BoneMorphOffset,
    MorphType.UV: UvMorphOffset,
    MorphType.EXTENDED_UV1: UvMorphOffset,
    MorphType.EXTENDED_UV2: UvMorphOffset,
    MorphType.EXTENDED_UV3: UvMorphOffset,
    MorphType.EXTENDED_UV4: UvMorphOffset,
    MorphType.MATERIAL: MaterialMorphOffset,
    MorphType.FLIP: FlipMorphOffset,
    MorphType.IMPULSE: ImpulseMorphOffset,
}


class Morph(BaseIndexNameModel):
    """
    モーフ

    Parameters
    ----------
    name : str, optional
        モーフ名, by default ""
    english_name : str, optional
        モーフ名英, by default ""
    panel : MorphPanel, optional
        モーフパネル, by default MorphPanel.EYE_UPPER_LEFT
    morph_type : MorphType, optional
        モーフ種類, by default MorphType.GROUP
    offsets : list[TMorphOffset], optional
        モーフオフセット(全てモーフ種類に対応する型), by default []
    """

    __slots__ = (
        "panel",
        "morph_type",
        "offsets",
    )

    def __init__(
        self,
        index: int = -1,
        name: str = "",
        english_name: str = "",
    ):
        super().__init__(index=index, name=name, english_name=english_name)
        self.panel = MorphPanel.EYE_UPPER_LEFT
        self.morph_type = MorphType.GROUP
        self.offsets: list[TMorphOffset] = []

    @property
    def offset_type(self) -> type:
        return MORPH_OFFSET_TYPES[self.morph_type]


@unique
class DisplayType(IntEnum):
    """表示枠要素タイプ"""

    BONE = 0
    """0:ボーン"""
    MORPH = 1
    """1:モーフ"""


class DisplaySlotReference(BaseModel):
    """
    表示枠要素

    Parameters
    ----------
    display_type : DisplayType, optional
        要素対象 0:ボーン 1:モーフ, by default DisplayType.BONE
    display_index : int, optional
        ボーンIndex or モーフIndex, by default -1
    """

    __slots__ = ("display_type", "display_index")

    def __init__(
        self,
        display_type: DisplayType = DisplayType.BONE,
        display_index: int = -1,
    ):
        super().__init__()
        self.display_type = display_type
        self.display_index = display_index


class DisplaySlot(BaseIndexNameModel):
    """
    表示枠

    Parameters
    ----------
    name : str, optional
        枠名, by default ""
    english_name : str, optional
        枠名英, by default ""
    special_flg : Switch, optional
        特殊枠フラグ - 0:通常枠 1:特殊枠, by default Switch.OFF
    references : list[DisplaySlotReference], optional
        表示枠要素, by default []
    """

    __slots__ = (
        "special_flg",
        "references",
    )

    def __init__(
        self,
        index: int = -1,
        name: str = "",
        english_name: str = "",
    ):
        super().__init__(index=index, name=name, english_name=english_name)
        self.special_flg = Switch.OFF
        self.references: list[DisplaySlotReference] = []


class RigidBodyParam(BaseModel):
    """
    剛体パラ

    Parameters
    ----------
    mass : float, optional
        質量, by default 0
    linear_damping : float, optional
        移動減衰, by default 0
    angular_damping : float, optional
        回転減衰, by default 0
    restitution : float, optional
        反発力, by default 0
    friction : float, optional
        摩擦力, by default 0
    """

    __slots__ = (
        "mass",
        "linear_damping",
        "angular_damping",
        "restitution",
        "friction",
    )

    def __init__(
        self,
        mass: float = 0,
        linear_damping: float = 0,
        angular_damping: float = 0,
        restitution: float = 0,
        friction: float = 0,
    ) -> None:
        super().__init__()
        self.mass = mass
        self.linear_damping = linear_damping
        self.angular_damping = angular_damping
        self.restitution = restitution
        self.friction = friction


@unique
class RigidBodyShape(IntEnum):
    """剛体の形状"""

    SPHERE = 0
    """0:球"""
    BOX = 1
    """1:箱"""
    CAPSULE = 2
    """2:カプセル"""


@unique
class RigidBodyMode(IntEnum):
    """剛体物理の計算モード"""

    STATIC = 0
    """0:ボーン追従(static)"""
    DYNAMIC = 1
    """1:物理演算(dynamic)"""
    DYNAMIC_BONE = 2
    """2:物理演算 + Bone位置合わせ"""


class RigidBodyCollisionGroup(IntFlag):
    """剛体の衝突グループ"""

    NONE = 0x0000
    """0:グループなし"""
    GROUP01 = 0x0001
    GROUP02 = 0x0002
    GROUP03 = 0x0004
    GROUP04 = 0x0008
    GROUP05 = 0x0010
    GROUP06 = 0x0020
    GROUP07 = 0x0040
    GROUP08 = 0x0080
    GROUP09 = 0x0100
    GROUP10 = 0x0200
    GROUP11 = 0x0400
    GROUP12 = 0x0800
    GROUP13 = 0x1000
    GROUP14 = 0x2000
    GROUP15 = 0x4000
    GROUP16 = 0x8000


class RigidBody(BaseIndexNameModel):
    """
    剛体

    Parameters
    ----------
    name : str, optional
        剛体名, by default ""
    english_name : str, optional
        剛体名英, by default ""
    bone_index : int, optional
        関連ボーンIndex, by default -1
    collision_group : int, optional
        グループ, by default 0
    no_collision_group : RigidBodyCollisionGroup, optional
        非衝突グループフラグ, by default 0
    shape_type : RigidBodyShape, optional
        形状, by default RigidBodyShape.SPHERE
    shape_size : MVector3D, optional
        サイズ(x,y,z), by default MVector3D()
    shape_position : MVector3D, optional
        位置(x,y,z), by default MVector3D()
    shape_rotation : MVector3D, optional
        回転(x,y,z) -> ラジアン角, by default MVector3D()
    param : RigidBodyParam, optional
        質量・減衰・反発力・摩擦力, by default RigidBodyParam()
    mode : RigidBodyMode, optional
        剛体の物理演算, by default RigidBodyMode.STATIC
    """

    __slots__ = (
        "bone_index",
        "collision_group",
        "no_collision_group",
        "shape_type",
        "shape_size",
        "shape_position",
        "shape_rotation",
        "param",
        "mode",
    )

    def __init__(
        self,
        index: int = -1,
        name: str = "",
        english_name: str = "",
    ) -> None:
        super().__init__(index=index, name=name, english_name=english_name)
        self.bone_index = -1
        self.collision_group = 0
        self.no_collision_group = RigidBodyCollisionGroup.NONE
        self.shape_type = RigidBodyShape.SPHERE
        self.shape_size = MVector3D()
        self.shape_position = MVector3D()
        self.shape_rotation = MVector3D()
        self.param = RigidBodyParam()
        self.mode = RigidBodyMode.STATIC


@unique
class JointType(IntEnum):
    """ジョイントの種類"""

    SPRING_6DOF = 0
    """0:バネ付6DOF"""
    DOF6 = 1
    """1:6DOF(2.1)"""
    P2P = 2
    """2:P2P(2.1)"""
    CONE_TWIST = 3
    """3:ConeTwist(2.1)"""
    SLIDER = 5
    """5:Slider(2.1)"""
    HINGE = 6
    """6:Hinge(2.1)"""


class JointParam(BaseModel):
    """
    ジョイントパラメーター

    Parameters
    ----------
    translation_limit_min : MVector3D, optional
        移動制限-下限(x,y,z), by default MVector3D()
    translation_limit_max : MVector3D, optional
        移動制限-上限(x,y,z), by default MVector3D()
    rotation_limit_min : MVector3D, optional
        回転制限-下限(x,y,z) -> ラジアン角, by default MVector3D()
    rotation_limit_max : MVector3D, optional
        回転制限-上限(x,y,z) -> ラジアン角, by default MVector3D()
    spring_constant_translation : MVector3D, optional
        バネ定数-移動(x,y,z), by default MVector3D()
    spring_constant_rotation : MVector3D, optional
        バネ定数-回転(x,y,z), by default MVector3D()
    """

    __slots__ = (
        "translation_limit_min",
        "translation_limit_max",
        "rotation_limit_min",
        "rotation_limit_max",
        "spring_constant_translation",
        "spring_constant_rotation",
    )

    def __init__(
        self,
    ) -> None:
        super().__init__()
        self.translation_limit_min = MVector3D()
        self.translation_limit_max = MVector3D()
        self.rotation_limit_min = MVector3D()
        self.rotation_limit_max = MVector3D()
        self.spring_constant_translation = MVector3D()
        self.spring_constant_rotation = MVector3D()


class Joint(BaseIndexNameModel):
    """
    ジョイント

    Parameters
    ----------
    name : str, optional
        Joint名, by default ""
    english_name : str, optional
        Joint名英, by default ""
    joint_type : JointType, optional
        Joint種類, by default JointType.SPRING_6DOF
    rigidbody_index_a : int, optional
        関連剛体AのIndex, by default -1
    rigidbody_index_b : int, optional
        関連剛体BのIndex, by default -1
    position : MVector3D, optional
        位置(x,y,z), by default MVector3D()
    rotation : MVector3D, optional
        回転(x,y,z) -> ラジアン角, by default MVector3D()
    param : JointParam, optional
        制限・バネ定数, by default JointParam()
    """

    __slots__ = (
        "joint_type",
        "rigidbody_index_a",
        "rigidbody_index_b",
        "position",
        "rotation",
        "param",
    )

    def __init__(
        self,
        index: int = -1,
        name: str = "",
        english_name: str = "",
    ) -> None:
        super().__init__(index=index, name=name, english_name=english_name)
        self.joint_type = JointType.SPRING_6DOF
        self.rigidbody_index_a = -1
        self.rigidbody_index_b = -1
        self.position = MVector3D()
        self.rotation = MVector3D()
        self.param = JointParam()


@unique
class SoftBodyShape(IntEnum):
    """ソフトボディの形状"""

    TRI_MESH = 0
    """0:TriMesh"""
    ROPE = 1
    """1:Rope"""


class SoftBodyFlg(IntFlag):
    """ソフトボディのフラグ"""

    NONE = 0x00
    B_LINK = 0x01
    """0x01:B-Link 作成"""
    CLUSTER = 0x02
    """0x02:クラスタ作成"""
    LINK = 0x04
    """0x04:リンク交雑"""


@unique
class SoftBodyAeroModel(IntEnum):
    """空力モデル"""

    V_POINT = 0
    V_TWO_SIDED = 1
    V_ONE_SIDED = 2
    F_TWO_SIDED = 3
    F_ONE_SIDED = 4


class SoftBodyConfig(BaseModel):
    """
    ソフトボディの各種係数

    Parameters
    ----------
    vcf : float
        Velocities correction factor (Baumgarte)
    dp : float
        Damping coefficient
    dg : float
        Drag coefficient
    lf : float
        Lift coefficient
    pr : float
        Pressure coefficient
    vc : float
        Volume conversation coefficient
    df : float
        Dynamic friction coefficient
    mt : float
        Pose matching coefficient
    chr : float
        Rigid contacts hardness
    khr : float
        Kinetic contacts hardness
    shr : float
        Soft contacts hardness
    ahr : float
        Anchors hardness
    """

    __slots__ = (
        "vcf",
        "dp",
        "dg",
        "lf",
        "pr",
        "vc",
        "df",
        "mt",
        "chr",
        "khr",
        "shr",
        "ahr",
    )

    def __init__(self) -> None:
        super().__init__()
        self.vcf = 0.0
        self.dp = 0.0
        self.dg = 0.0
        self.lf = 0.0
        self.pr = 0.0
        self.vc = 0.0
        self.df = 0.0
        self.mt = 0.0
        self.chr = 0.0
        self.khr = 0.0
        self.shr = 0.0
        self.ahr = 0.0


class SoftBodyCluster(BaseModel):
    """ソフトボディのクラスタ係数"""

    __slots__ = (
        "srhr_cl",
        "skhr_cl",
        "sshr_cl",
        "sr_splt_cl",
        "sk_splt_cl",
        "ss_splt_cl",
    )

    def __init__(self) -> None:
        super().__init__()
        self.srhr_cl = 0.0
        self.skhr_cl = 0.0
        self.sshr_cl = 0.0
        self.sr_splt_cl = 0.0
        self.sk_splt_cl = 0.0
        self.ss_splt_cl = 0.0


class SoftBodyIteration(BaseModel):
    """ソフトボディの反復回数"""

    __slots__ = ("v_it", "p_it", "d_it", "c_it")

    def __init__(self) -> None:
        super().__init__()
        self.v_it = 0
        self.p_it = 0
        self.d_it = 0
        self.c_it = 0


class SoftBodyMaterial(BaseModel):
    """ソフトボディのマテリアル係数"""

    __slots__ = ("lst", "ast", "vst")

    def __init__(self) -> None:
        super().__init__()
        self.lst = 0.0
        self.ast = 0.0
        self.vst = 0.0


class SoftBodyAnchor(BaseModel):
    """
    ソフトボディのアンカー剛体

    Parameters
    ----------
    rigidbody_index : int
        関連剛体Index
    vertex_index : int
        関連頂点Index
    near_mode : Switch
        Near モード 0:OFF 1:ON
    """

    __slots__ = ("rigidbody_index", "vertex_index", "near_mode")

    def __init__(
        self,
        rigidbody_index: int = -1,
        vertex_index: int = 0,
        near_mode: Switch = Switch.OFF,
    ) -> None:
        super().__init__()
        self.rigidbody_index = rigidbody_index
        self.vertex_index = vertex_index
        self.near_mode = near_mode


class SoftBody(BaseIndexNameModel):
    """
    ソフトボディ(2.1)

    Parameters
    ----------
    name : str, optional
        ソフトボディ名, by default ""
    english_name : str, optional
        ソフトボディ名英, by default ""
    shape_type : SoftBodyShape, optional
        形状, by default SoftBodyShape.TRI_MESH
    material_index : int, optional
        関連材質Index, by default -1
    collision_group : int, optional
        グループ, by default 0
    no_collision_group : RigidBodyCollisionGroup, optional
        非衝突グループフラグ, by default 0
    flg : SoftBodyFlg, optional
        フラグ, by default SoftBodyFlg.NONE
    b_link_distance : int, optional
        B-Link 作成距離, by default 0
    cluster_count : int, optional
        クラスタ数, by default 0
    mass : float, optional
        総質量, by default 0
    collision_margin : float, optional
        衝突マージン, by default 0
    aero_model : SoftBodyAeroModel, optional
        空力モデル, by default SoftBodyAeroModel.V_POINT
    config : SoftBodyConfig
        各種係数
    cluster : SoftBodyCluster
        クラスタ係数
    iteration : SoftBodyIteration
        反復回数
    material : SoftBodyMaterial
        マテリアル係数
    anchors : list[SoftBodyAnchor]
        アンカー剛体
    pin_vertex_indexes : list[int]
        ピン頂点Index
    """

    __slots__ = (
        "shape_type",
        "material_index",
        "collision_group",
        "no_collision_group",
        "flg",
        "b_link_distance",
        "cluster_count",
        "mass",
        "collision_margin",
        "aero_model",
        "config",
        "cluster",
        "iteration",
        "material",
        "anchors",
        "pin_vertex_indexes",
    )

    def __init__(
        self,
        index: int = -1,
        name: str = "",
        english_name: str = "",
    ) -> None:
        super().__init__(index=index, name=name, english_name=english_name)
        self.shape_type = SoftBodyShape.TRI_MESH
        self.material_index = -1
        self.collision_group = 0
        self.no_collision_group = RigidBodyCollisionGroup.NONE
        self.flg = SoftBodyFlg.NONE
        self.b_link_distance = 0
        self.cluster_count = 0
        self.mass = 0.0
        self.collision_margin = 0.0
        self.aero_model = SoftBodyAeroModel.V_POINT
        self.config = SoftBodyConfig()
        self.cluster = SoftBodyCluster()
        self.iteration = SoftBodyIteration()
        self.material = SoftBodyMaterial()
        self.anchors: list[SoftBodyAnchor] = []
        self.pin_vertex_indexes: list[int] = []
