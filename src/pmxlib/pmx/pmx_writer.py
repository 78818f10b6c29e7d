import os
from io import BytesIO
from struct import Struct
from typing import BinaryIO, Callable

from pmxlib.core.exception import (
    MCodecException,
    MIndexWidthOverflowException,
    MInvalidSettingException,
    MVariantMismatchException,
)
from pmxlib.core.logger import MLogger
from pmxlib.core.writer import BaseWriter
from pmxlib.pmx.pmx_collection import PmxModel
from pmxlib.pmx.pmx_part import (
    BoneMorphOffset,
    DeformType,
    DisplayType,
    GroupMorphOffset,
    ImpulseMorphOffset,
    MaterialMorphOffset,
    Sdef,
    TDeform,
    ToonSharing,
    UvMorphOffset,
    VertexMorphOffset,
)
from pmxlib.pmx.pmx_setting import SETTING_SIZE, IndexFormat, IndexKind, PmxSetting

logger = MLogger(os.path.basename(__file__))
__ = logger.get_text


class PmxWriter(BaseWriter):
    """
    PMX出力

    Parameters
    ----------
    model : PmxModel
        出力対象モデル(出力処理で変更はしない)
    is_fit_setting : bool, optional
        INDEXサイズをモデルの設定ではなく各要素数から求めた最小サイズで出力するか, by default False
    """

    def __init__(self, model: PmxModel, is_fit_setting: bool = False) -> None:
        super().__init__()
        self.model = model
        self.is_fit_setting = is_fit_setting
        self.setting = model.setting

    def save(self, fout: BinaryIO) -> None:
        """
        出力先にモデルを書き込む
        全体の出力に成功した場合のみ、一度だけ書き込む

        Parameters
        ----------
        fout : BinaryIO
            書き込み可能なバイナリストリーム
        """
        fout.write(self.to_bytes())

    def to_bytes(self) -> bytes:
        """モデルをバイト列に変換する"""
        self.fout = BytesIO()
        self.section = None
        self.section_index = None

        self.write_header()

        # 頂点出力
        self.write_vertices()

        # 面出力
        self.write_indices()

        # テクスチャ出力
        self.write_textures()

        # 材質出力
        self.write_materials()

        # ボーン出力
        self.write_bones()

        # モーフ出力
        self.write_morphs()

        # 表示枠出力
        self.write_display_slots()

        # 剛体出力
        self.write_rigidbodies()

        # ジョイント出力
        self.write_joints()

        if self.model.has_soft_bodies:
            # ソフトボディ出力(2.1のみ)
            self.write_soft_bodies()
        elif self.model.soft_bodies:
            raise MInvalidSettingException(
                "PMX{v:.1f}ではソフトボディを出力できません: {c}",
                section="soft_bodies",
                v=self.model.version,
                c=len(self.model.soft_bodies),
            )

        self.start_section(None)

        logger.debug("PMX出力終了: {s} bytes", s=self.offset)

        return self.fout.getvalue()

    def write_header(self) -> None:
        self.start_section("header")

        # シグニチャ
        self.write_bytes(PmxModel.SIGNATURE.encode("ascii"))
        self.write_float(self.model.version)

        self.start_section("setting")
        self.setting = (
            PmxSetting.fit(self.model) if self.is_fit_setting else self.model.setting
        )
        try:
            self.setting.validate()
        except MCodecException as e:
            e.section = self.section
            e.offset = self.offset
            raise

        # 後続するデータ列のバイトサイズ  PMX2.0は 8 で固定
        self.write_byte(SETTING_SIZE + len(self.setting.reserved))
        # エンコード方式  | 0:UTF16 1:UTF8
        self.write_byte(self.setting.encoding_type)
        # 追加UV数
        self.write_byte(self.setting.extended_uv_count)
        # 頂点・テクスチャ・材質・ボーン・モーフ・剛体 Indexサイズ | 1,2,4 のいずれか
        for index_size in self.setting.index_sizes:
            self.write_byte(index_size)
        self.write_bytes(self.setting.reserved)

        self.define_encoding(self.setting.encoding)

        self.write_vertex_index = self.define_write_index(
            self.setting.index_format(IndexKind.VERTEX)
        )
        self.write_texture_index = self.define_write_index(
            self.setting.index_format(IndexKind.TEXTURE)
        )
        self.write_material_index = self.define_write_index(
            self.setting.index_format(IndexKind.MATERIAL)
        )
        self.write_bone_index = self.define_write_index(
            self.setting.index_format(IndexKind.BONE)
        )
        self.write_morph_index = self.define_write_index(
            self.setting.index_format(IndexKind.MORPH)
        )
        self.write_rigidbody_index = self.define_write_index(
            self.setting.index_format(IndexKind.RIGIDBODY)
        )

        # モデル名(日本語)
        self.start_section("model_name")
        self.write_text(self.model.model_name)
        # モデル名(英語)
        self.start_section("english_name")
        self.write_text(self.model.english_name)
        # コメント(日本語)
        self.start_section("comment")
        self.write_text(self.model.comment)
        # コメント(英語)
        self.start_section("english_comment")
        self.write_text(self.model.english_comment)

    def write_vertices(self):
        """頂点出力"""
        self.start_section("vertices")
        self.write_int(len(self.model.vertices))

        # 頂点データ
        for vertex in self.model.vertices:
            self.section_index = vertex.index
            logger.count(
                "頂点データ出力",
                index=vertex.index,
                total_index_count=len(self.model.vertices),
                display_block=10000,
            )

            # position
            self.write_MVector(vertex.position)
            # normal
            self.write_MVector(vertex.normal)
            # uv
            self.write_MVector(vertex.uv)
            # 追加uv
            if len(vertex.extended_uvs) != self.setting.extended_uv_count:
                raise MInvalidSettingException(
                    "追加UVの数が設定と一致しません 頂点: {c}, 設定: {s}",
                    section=self.section,
                    index=self.section_index,
                    offset=self.offset,
                    c=len(vertex.extended_uvs),
                    s=self.setting.extended_uv_count,
                )
            for uv in vertex.extended_uvs:
                self.write_MVector(uv)

            # deform
            self.write_deform(vertex.deform)

            self.write_float(vertex.edge_factor)

        logger.debug("-- 頂点データ出力終了({c})", c=len(self.model.vertices))

    def write_deform(self, deform: TDeform) -> None:
        """ウェイト変形方式はデフォームの型から決める"""
        deform_type = deform.type()
        self.write_byte(deform_type.value)

        if DeformType.BDEF1 == deform_type:
            self.write_bone_index(int(deform.indexes[0]))
        elif deform_type in (DeformType.BDEF2, DeformType.SDEF):
            self.write_bone_index(int(deform.indexes[0]))
            self.write_bone_index(int(deform.indexes[1]))
            self.write_float(float(deform.weights[0]))

            if isinstance(deform, Sdef):
                self.write_MVector(deform.sdef_c)
                self.write_MVector(deform.sdef_r0)
                self.write_MVector(deform.sdef_r1)
        else:
            for n in range(4):
                self.write_bone_index(int(deform.indexes[n]))
            for n in range(4):
                self.write_float(float(deform.weights[n]))

    def write_indices(self):
        """面出力"""
        self.start_section("indices")

        # 面を構成する頂点の数
        self.write_int(len(self.model.indices))

        for n, vidx in enumerate(self.model.indices):
            self.section_index = n
            self.write_vertex_index(vidx)

        logger.debug("-- 面データ出力終了({c})", c=len(self.model.indices) // 3)

    def write_textures(self):
        """テクスチャ出力"""
        self.start_section("textures")
        self.write_int(len(self.model.textures))

        # テクスチャデータ
        for texture in self.model.textures:
            self.section_index = texture.index
            self.write_text(texture.name)

        logger.debug("-- テクスチャデータ出力終了({c})", c=len(self.model.textures))

    def write_materials(self):
        """材質出力"""
        self.start_section("materials")
        self.write_int(len(self.model.materials))

        # 材質データ
        for material in self.model.materials:
            self.section_index = material.index
            logger.count(
                "材質データ出力",
                index=material.index,
                total_index_count=len(self.model.materials),
                display_block=1000,
            )

            # 材質名
            self.write_text(material.name)
            self.write_text(material.english_name)
            # Diffuse
            self.write_MVector(material.diffuse)
            # Specular
            self.write_MVector(material.specular)
            # Specular係数
            self.write_float(material.specular_factor)
            # Ambient
            self.write_MVector(material.ambient)
            # 描画フラグ(8bit)
            self.write_byte(int(material.draw_flg))
            # エッジ色 (R,G,B,A)
            self.write_MVector(material.edge_color)
            # エッジサイズ
            self.write_float(material.edge_size)
            # 通常テクスチャ
            self.write_texture_index(material.texture_index)
            # スフィアテクスチャ
            self.write_texture_index(material.sphere_texture_index)
            # スフィアモード
            self.write_byte(int(material.sphere_mode))
            # 共有Toonフラグ
            self.write_byte(int(material.toon_sharing_flg))
            if material.toon_sharing_flg == ToonSharing.INDIVIDUAL:
                # 個別Toonテクスチャ
                self.write_texture_index(material.toon_texture_index)
            else:
                # 共有Toonテクスチャ[0～9]
                self.write_byte(material.toon_texture_index)
            # コメント
            self.write_text(material.comment)
            # 材質に対応する面(頂点)数
            self.write_int(material.vertices_count)

        logger.debug("-- 材質データ出力終了({c})", c=len(self.model.materials))

    def write_bones(self):
        """ボーン出力"""
        self.start_section("bones")
        self.write_int(len(self.model.bones))

        for bone in self.model.bones:
            self.section_index = bone.index
            logger.count(
                "ボーンデータ出力",
                index=bone.index,
                total_index_count=len(self.model.bones),
                display_block=100,
            )

            # ボーン名
            self.write_text(bone.name)
            self.write_text(bone.english_name)
            # position
            self.write_MVector(bone.position)
            # 親ボーンのボーンIndex
            self.write_bone_index(bone.parent_index)
            # 変形階層
            self.write_int(bone.layer)
            # ボーンフラグ(後続データの有無は各グループから決める)
            self.write_ushort(int(bone.flag))

            if bone.tail_index is not None:
                # 接続先ボーンのボーンIndex
                self.write_bone_index(bone.tail_index)
            else:
                # 接続先位置
                self.write_MVector(bone.tail_position)

            if bone.has_effect and bone.effect:
                # 付与親指定ありの場合
                self.write_bone_index(bone.effect.index)
                self.write_float(bone.effect.factor)

            if bone.fixed_axis is not None:
                # 軸制限先
                self.write_MVector(bone.fixed_axis)

            if bone.local_axis is not None:
                # ローカルX
                self.write_MVector(bone.local_axis.x_vector)
                # ローカルZ
                self.write_MVector(bone.local_axis.z_vector)

            if bone.external_key is not None:
                self.write_int(bone.external_key)

            if bone.ik is not None:
                # IKボーン
                # n  : ボーンIndexサイズ  | IKターゲットボーンのボーンIndex
                self.write_bone_index(bone.ik.bone_index)
                # 4  : int  	| IKループ回数
                self.write_int(bone.ik.loop_count)
                # 4  : float	| IKループ計算時の1回あたりの制限角度 -> ラジアン角
                self.write_float(bone.ik.unit_rotation)
                # 4  : int  	| IKリンク数 : 後続の要素数
                self.write_int(len(bone.ik.links))

                for link in bone.ik.links:
                    # n  : ボーンIndexサイズ  | リンクボーンのボーンIndex
                    self.write_bone_index(link.bone_index)
                    # 1  : byte	| 角度制限 0:OFF 1:ON
                    self.write_byte(link.angle_limit)

                    if link.angle_limit:
                        self.write_MVector(link.min_angle_limit)
                        self.write_MVector(link.max_angle_limit)

        logger.debug("-- ボーンデータ出力終了({c})", c=len(self.model.bones))

    def write_morphs(self):
        """モーフ出力"""
        self.start_section("morphs")
        self.write_int(len(self.model.morphs))

        for morph in self.model.morphs:
            self.section_index = morph.index
            logger.count(
                "モーフデータ出力",
                index=morph.index,
                total_index_count=len(self.model.morphs),
                display_block=1000,
            )

            # モーフ名
            self.write_text(morph.name)
            self.write_text(morph.english_name)
            # 操作パネル (PMD:カテゴリ) 1:眉(左下) 2:目(左上) 3:口(右上) 4:その他(右下)  | 0:システム予約
            self.write_byte(int(morph.panel))
            # モーフ種類 - 0:グループ, 1:頂点, 2:ボーン, 3:UV, 4:追加UV1, 5:追加UV2, 6:追加UV3, 7:追加UV4, 8:材質, 9:フリップ, 10:インパルス
            self.write_byte(int(morph.morph_type))
            # モーフのオフセット数 : 後続の要素数
            self.write_int(len(morph.offsets))

            offset_type = morph.offset_type
            for offset in morph.offsets:
                if type(offset) is not offset_type:
                    raise MVariantMismatchException(
                        "モーフ種類とオフセットの型が一致しません 種類: {t}, オフセット: {o}",
                        section=self.section,
                        index=self.section_index,
                        offset=self.offset,
                        t=morph.morph_type.name,
                        o=offset.__class__.__name__,
                    )

                if isinstance(offset, VertexMorphOffset):
                    # 頂点モーフ
                    self.write_vertex_index(offset.vertex_index)
                    self.write_MVector(offset.position)
                elif isinstance(offset, UvMorphOffset):
                    # UVモーフ
                    self.write_vertex_index(offset.vertex_index)
                    self.write_MVector(offset.uv)
                elif isinstance(offset, BoneMorphOffset):
                    # ボーンモーフ
                    self.write_bone_index(offset.bone_index)
                    self.write_MVector(offset.position)
                    self.write_MQuaternion(offset.qq)
                elif isinstance(offset, MaterialMorphOffset):
                    # 材質モーフ
                    self.write_material_index(offset.material_index)
                    self.write_byte(int(offset.calc_mode))
                    self.write_MVector(offset.diffuse)
                    self.write_MVector(offset.specular)
                    self.write_float(offset.specular_factor)
                    self.write_MVector(offset.ambient)
                    self.write_MVector(offset.edge_color)
                    self.write_float(offset.edge_size)
                    self.write_MVector(offset.texture_factor)
                    self.write_MVector(offset.sphere_texture_factor)
                    self.write_MVector(offset.toon_texture_factor)
                elif isinstance(offset, GroupMorphOffset):
                    # グループモーフ・フリップモーフ
                    self.write_morph_index(offset.morph_index)
                    self.write_float(offset.morph_factor)
                elif isinstance(offset, ImpulseMorphOffset):
                    # インパルスモーフ
                    self.write_rigidbody_index(offset.rigidbody_index)
                    self.write_byte(int(offset.local_flg))
                    self.write_MVector(offset.velocity)
                    self.write_MVector(offset.torque)

        logger.debug("-- モーフデータ出力終了({c})", c=len(self.model.morphs))

    def write_display_slots(self):
        """表示枠出力"""
        self.start_section("display_slots")
        self.write_int(len(self.model.display_slots))

        for display_slot in self.model.display_slots:
            self.section_index = display_slot.index

            # 表示枠名
            self.write_text(display_slot.name)
            self.write_text(display_slot.english_name)
            # 特殊枠フラグ - 0:通常枠 1:特殊枠
            self.write_byte(int(display_slot.special_flg))
            # 枠内要素数
            self.write_int(len(display_slot.references))
            # ボーンの場合
            for reference in display_slot.references:
                # 要素対象 0:ボーン 1:モーフ
                self.write_byte(int(reference.display_type))
                if reference.display_type == DisplayType.BONE:
                    self.write_bone_index(reference.display_index)
                else:
                    self.write_morph_index(reference.display_index)

        logger.debug("-- 表示枠データ出力終了({c})", c=len(self.model.display_slots))

    def write_rigidbodies(self):
        """剛体出力"""
        self.start_section("rigidbodies")
        self.write_int(len(self.model.rigidbodies))

        for rigidbody in self.model.rigidbodies:
            self.section_index = rigidbody.index

            # 剛体名
            self.write_text(rigidbody.name)
            self.write_text(rigidbody.english_name)
            # ボーンIndex
            self.write_bone_index(rigidbody.bone_index)
            # 1  : byte	| グループ
            self.write_byte(rigidbody.collision_group)
            # 2  : ushort	| 非衝突グループフラグ
            self.write_ushort(int(rigidbody.no_collision_group))
            # 1  : byte	| 形状 - 0:球 1:箱 2:カプセル
            self.write_byte(int(rigidbody.shape_type))
            # 12 : float3	| サイズ(x,y,z)
            self.write_MVector(rigidbody.shape_size)
            # 12 : float3	| 位置(x,y,z)
            self.write_MVector(rigidbody.shape_position)
            # 12 : float3	| 回転(x,y,z)
            self.write_MVector(rigidbody.shape_rotation)
            # 4  : float	| 質量
            self.write_float(rigidbody.param.mass)
            # 4  : float	| 移動減衰
            self.write_float(rigidbody.param.linear_damping)
            # 4  : float	| 回転減衰
            self.write_float(rigidbody.param.angular_damping)
            # 4  : float	| 反発力
            self.write_float(rigidbody.param.restitution)
            # 4  : float	| 摩擦力
            self.write_float(rigidbody.param.friction)
            # 1  : byte	| 剛体の物理演算 - 0:ボーン追従(static) 1:物理演算(dynamic) 2:物理演算 + Bone位置合わせ
            self.write_byte(int(rigidbody.mode))

        logger.debug("-- 剛体データ出力終了({c})", c=len(self.model.rigidbodies))

    def write_joints(self):
        """ジョイント出力"""
        self.start_section("joints")
        self.write_int(len(self.model.joints))

        for joint in self.model.joints:
            self.section_index = joint.index

            # ジョイント名
            self.write_text(joint.name)
            self.write_text(joint.english_name)
            # 1  : byte	| Joint種類 - 0:スプリング6DOF
            self.write_byte(int(joint.joint_type))
            # n  : 剛体Indexサイズ  | 関連剛体AのIndex - 関連なしの場合は-1
            self.write_rigidbody_index(joint.rigidbody_index_a)
            # n  : 剛体Indexサイズ  | 関連剛体BのIndex - 関連なしの場合は-1
            self.write_rigidbody_index(joint.rigidbody_index_b)
            # 12 : float3	| 位置(x,y,z)
            self.write_MVector(joint.position)
            # 12 : float3	| 回転(x,y,z) -> ラジアン角
            self.write_MVector(joint.rotation)
            # 12 : float3	| 移動制限-下限(x,y,z)
            self.write_MVector(joint.param.translation_limit_min)
            # 12 : float3	| 移動制限-上限(x,y,z)
            self.write_MVector(joint.param.translation_limit_max)
            # 12 : float3	| 回転制限-下限(x,y,z) -> ラジアン角
            self.write_MVector(joint.param.rotation_limit_min)
            # 12 : float3	| 回転制限-上限(x,y,z) -> ラジアン角
            self.write_MVector(joint.param.rotation_limit_max)
            # 12 : float3	| バネ定数-移動(x,y,z)
            self.write_MVector(joint.param.spring_constant_translation)
            # 12 : float3	| バネ定数-回転(x,y,z)
            self.write_MVector(joint.param.spring_constant_rotation)

        logger.debug("-- ジョイントデータ出力終了({c})", c=len(self.model.joints))

    def write_soft_bodies(self):
        """ソフトボディ出力"""
        self.start_section("soft_bodies")
        self.write_int(len(self.model.soft_bodies))

        for soft_body in self.model.soft_bodies:
            self.section_index = soft_body.index

            self.write_text(soft_body.name)
            self.write_text(soft_body.english_name)
            # 1  : byte	| 形状 - 0:TriMesh 1:Rope
            self.write_byte(int(soft_body.shape_type))
            self.write_material_index(soft_body.material_index)
            self.write_byte(soft_body.collision_group)
            self.write_ushort(int(soft_body.no_collision_group))
            self.write_byte(int(soft_body.flg))
            self.write_int(soft_body.b_link_distance)
            self.write_int(soft_body.cluster_count)
            self.write_float(soft_body.mass)
            self.write_float(soft_body.collision_margin)
            self.write_int(int(soft_body.aero_model))

            config = soft_body.config
            for value in (
                config.vcf,
                config.dp,
                config.dg,
                config.lf,
                config.pr,
                config.vc,
                config.df,
                config.mt,
                config.chr,
                config.khr,
                config.shr,
                config.ahr,
            ):
                self.write_float(value)

            cluster = soft_body.cluster
            for value in (
                cluster.srhr_cl,
                cluster.skhr_cl,
                cluster.sshr_cl,
                cluster.sr_splt_cl,
                cluster.sk_splt_cl,
                cluster.ss_splt_cl,
            ):
                self.write_float(value)

            iteration = soft_body.iteration
            for value in (
                iteration.v_it,
                iteration.p_it,
                iteration.d_it,
                iteration.c_it,
            ):
                self.write_int(value)

            material = soft_body.material
            for value in (material.lst, material.ast, material.vst):
                self.write_float(value)

            # アンカー剛体
            self.write_int(len(soft_body.anchors))
            for anchor in soft_body.anchors:
                self.write_rigidbody_index(anchor.rigidbody_index)
                self.write_vertex_index(anchor.vertex_index)
                self.write_byte(int(anchor.near_mode))

            # ピン頂点
            self.write_int(len(soft_body.pin_vertex_indexes))
            for vertex_index in soft_body.pin_vertex_indexes:
                self.write_vertex_index(vertex_index)

        logger.debug("-- ソフトボディデータ出力終了({c})", c=len(self.model.soft_bodies))

    def define_write_index(self, index_format: IndexFormat) -> Callable[[int], None]:
        """
        INDEX書き込み定義

        Parameters
        ----------
        index_format : IndexFormat
            INDEXの種別とサイズ

        Returns
        -------
        function
            書き込み定義関数
        """
        packer = Struct(f"<{index_format.format}")

        def write_index(value: int) -> None:
            if not index_format.can_represent(value):
                raise MIndexWidthOverflowException(
                    "INDEXが設定サイズで表現できません kind: {k}, width: {w}, value: {v}",
                    section=self.section,
                    index=self.section_index,
                    offset=self.offset,
                    k=index_format.kind.name,
                    w=index_format.width,
                    v=value,
                )
            self.write_bytes(packer.pack(value))

        return write_index
