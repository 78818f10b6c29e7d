import os
from enum import Enum
from struct import Struct
from typing import Callable, Optional, TypeVar

from pmxlib.core.exception import (
    MCodecException,
    MInvalidSettingException,
    MParseException,
    MUnknownVariantTagException,
)
from pmxlib.core.logger import MLogger
from pmxlib.core.part import Switch
from pmxlib.core.reader import BaseReader, StructUnpackType
from pmxlib.pmx.pmx_collection import PmxModel
from pmxlib.pmx.pmx_part import (
    BONE_FIELD_FLAGS,
    Bdef1,
    Bdef2,
    Bdef4,
    Bone,
    BoneEffect,
    BoneFlg,
    BoneLocalAxis,
    BoneMorphOffset,
    DeformType,
    DisplaySlot,
    DisplaySlotReference,
    DisplayType,
    DrawFlg,
    FlipMorphOffset,
    GroupMorphOffset,
    Ik,
    IkLink,
    ImpulseMorphOffset,
    Joint,
    JointType,
    Material,
    MaterialMorphCalcMode,
    MaterialMorphOffset,
    Morph,
    MorphPanel,
    MorphType,
    Qdef,
    RigidBody,
    RigidBodyCollisionGroup,
    RigidBodyMode,
    RigidBodyShape,
    Sdef,
    SoftBody,
    SoftBodyAeroModel,
    SoftBodyAnchor,
    SoftBodyFlg,
    SoftBodyShape,
    SphereMode,
    TDeform,
    Texture,
    ToonSharing,
    UvMorphOffset,
    Vertex,
    VertexMorphOffset,
)
from pmxlib.pmx.pmx_setting import SETTING_SIZE, IndexFormat, IndexKind, PmxSetting
from pmxlib.pmx.pmx_validator import PmxValidator

# バージョン比較用
FLOAT_PACKER = Struct("<f")

logger = MLogger(os.path.basename(__file__))
__ = logger.get_text

TEnum = TypeVar("TEnum", bound=Enum)


class PmxReader(BaseReader[PmxModel]):
    """
    PMX読み込み

    Parameters
    ----------
    is_validate : bool, optional
        読み込み後に参照整合性チェックを行うか, by default True
    width_tolerance : Optional[int], optional
        INDEXサイズが要素数から求めた最小サイズより何段階大きければ警告するか
        (None の場合はチェックしない), by default None
    """

    def __init__(
        self, is_validate: bool = True, width_tolerance: Optional[int] = None
    ) -> None:
        super().__init__()
        self.is_validate = is_validate
        self.width_tolerance = width_tolerance

    def create_model(self) -> PmxModel:
        return PmxModel()

    def read_by_buffer_header(self, model: PmxModel):
        self.start_section("header")

        # pmx宣言
        signature = self.unpack_bytes(4)
        if PmxModel.SIGNATURE.encode("ascii") != signature:
            raise MParseException(
                "PMX形式外のデータです。signature: {s}",
                section=self.section,
                offset=0,
                s=signature.hex(),
            )
        model.signature = PmxModel.SIGNATURE

        # pmxバージョン
        version = self.read_float()
        model_version = round(version, 1)
        if model_version not in (2.0, 2.1) or FLOAT_PACKER.pack(
            model_version
        ) != FLOAT_PACKER.pack(version):
            raise MParseException(
                "PMX2.0/2.1形式外のデータです。version: {v}",
                section=self.section,
                offset=4,
                v=version,
            )
        model.version = model_version

        self.start_section("setting")

        # 後続するデータ列のバイトサイズ  PMX2.0は 8 で固定
        setting_offset = self.offset
        setting_size = self.read_byte()
        if SETTING_SIZE > setting_size:
            raise MInvalidSettingException(
                "設定データ列のサイズが不足しています: {s}",
                section=self.section,
                offset=setting_offset,
                s=setting_size,
            )

        # [0] - エンコード方式  | 0:UTF16 1:UTF8
        # [1] - 追加UV数 	| 0～4 詳細は頂点参照
        # [2] - 頂点Indexサイズ | 1,2,4 のいずれか
        # [3] - テクスチャIndexサイズ | 1,2,4 のいずれか
        # [4] - 材質Indexサイズ | 1,2,4 のいずれか
        # [5] - ボーンIndexサイズ | 1,2,4 のいずれか
        # [6] - モーフIndexサイズ | 1,2,4 のいずれか
        # [7] - 剛体Indexサイズ | 1,2,4 のいずれか
        (
            encoding_type,
            extended_uv_count,
            *index_sizes,
        ) = self.unpack(Struct("<BBBBBBBB").unpack_from, SETTING_SIZE)

        setting = PmxSetting(extended_uv_count=extended_uv_count)
        setting.index_sizes = index_sizes
        try:
            setting.encoding = PmxSetting.to_encoding(encoding_type)
            setting.check_extended_uv_count()
            setting.check_index_sizes()
        except MCodecException as e:
            e.section = self.section
            e.offset = setting_offset
            raise

        # 8byteを超える分はそのまま保持する
        setting.reserved = self.unpack_bytes(setting_size - SETTING_SIZE)
        model.setting = setting
        self.define_encoding(setting.encoding)

        self.start_section("model_name")

        # モデル名（日本語）
        model.model_name = self.read_text()

    def read_by_buffer(self, model: PmxModel):
        logger.info("PMXモデルデータ読み取り開始")

        # モデルの設定から読み取り処理を設定
        self.read_vertex_index, self.vertex_index_format = self.define_read_index(
            model.setting.index_format(IndexKind.VERTEX)
        )
        self.read_texture_index, self.texture_index_format = self.define_read_index(
            model.setting.index_format(IndexKind.TEXTURE)
        )
        self.read_material_index, self.material_index_format = self.define_read_index(
            model.setting.index_format(IndexKind.MATERIAL)
        )
        self.read_bone_index, self.bone_index_format = self.define_read_index(
            model.setting.index_format(IndexKind.BONE)
        )
        self.read_morph_index, self.morph_index_format = self.define_read_index(
            model.setting.index_format(IndexKind.MORPH)
        )
        self.read_rigidbody_index, self.rigidbody_index_format = self.define_read_index(
            model.setting.index_format(IndexKind.RIGIDBODY)
        )

        texture_index = self.texture_index_format.format
        bone_index = self.bone_index_format.format
        rigidbody_index = self.rigidbody_index_format.format

        self.read_by_format[Vertex] = StructUnpackType(
            Struct(f"<{'fff' * 2}{'ff'}").unpack_from, 4 * 8
        )
        self.read_by_format[Material] = StructUnpackType(
            Struct(f"<fffffffffffBfffff{texture_index * 2}BB").unpack_from,
            (self.texture_index_format.width * 2) + (1 * 3) + (4 * 16),
        )
        self.read_by_format[RigidBody] = StructUnpackType(
            Struct(f"<{bone_index}BHB{'fff' * 3}fffffB").unpack_from,
            self.bone_index_format.width + (1 * 3) + (2) + (4 * 3 * 3) + (4 * 5),
        )
        self.read_by_format[Joint] = StructUnpackType(
            Struct(f"<B{rigidbody_index * 2}{'fff' * 8}").unpack_from,
            1 + (self.rigidbody_index_format.width * 2) + (4 * 3 * 8),
        )

        # モデル名（英語）
        self.start_section("english_name")
        model.english_name = self.read_text()

        # コメント
        self.start_section("comment")
        model.comment = self.read_text()

        # コメント英
        self.start_section("english_comment")
        model.english_comment = self.read_text()

        # 頂点
        self.read_vertices(model)

        logger.info("頂点データ読み取り完了: {c}", c=len(model.vertices))

        # 面
        self.read_indices(model)

        logger.info("面データ読み取り完了: {c}", c=len(model.indices) // 3)

        # テクスチャ
        self.read_textures(model)

        logger.info("テクスチャデータ読み取り完了: {c}", c=len(model.textures))

        # 材質
        self.read_materials(model)

        logger.info("材質データ読み取り完了: {c}", c=len(model.materials))

        # ボーン
        self.read_bones(model)

        logger.info("ボーンデータ読み取り完了: {c}", c=len(model.bones))

        # モーフ
        self.read_morphs(model)

        logger.info("モーフデータ読み取り完了: {c}", c=len(model.morphs))

        # 表示枠
        self.read_display_slots(model)

        logger.info("表示枠データ読み取り完了: {c}", c=len(model.display_slots))

        # 剛体
        self.read_rigidbodies(model)

        logger.info("剛体データ読み取り完了: {c}", c=len(model.rigidbodies))

        # ジョイント
        self.read_joints(model)

        logger.info("ジョイントデータ読み取り完了: {c}", c=len(model.joints))

        if model.has_soft_bodies:
            # ソフトボディ(2.1のみ)
            self.read_soft_bodies(model)

            logger.info("ソフトボディデータ読み取り完了: {c}", c=len(model.soft_bodies))

        self.start_section(None)

        if self.is_validate:
            logger.info("モデルチェック開始", decoration=MLogger.Decoration.LINE)

            PmxValidator(model, self.width_tolerance).validate()

            logger.info("モデルチェック完了", decoration=MLogger.Decoration.LINE)

        model.log_summary()

    def read_count(self, section: str) -> int:
        """セクションを開始して要素数を読み取る"""
        self.start_section(section)
        count_offset = self.offset
        total_index_count = self.read_int()
        if 0 > total_index_count:
            raise MParseException(
                "要素数が負数です: {c}",
                section=self.section,
                offset=count_offset,
                c=total_index_count,
            )
        return total_index_count

    def read_variant(self, enum_type: type[TEnum], value: int) -> TEnum:
        """
        種別値を列挙型に変換する

        Raises
        ------
        MUnknownVariantTagException
            定義外の値だった場合
        """
        try:
            return enum_type(value)
        except ValueError as e:
            raise MUnknownVariantTagException(
                "{t}の種別が不明です: {v}",
                section=self.section,
                index=self.section_index,
                offset=self.offset,
                t=enum_type.__name__,
                v=value,
            ) from e

    def read_vertices(self, model: PmxModel):
        """頂点データ読み込み"""
        total_index_count = self.read_count("vertices")
        for i in range(total_index_count):
            self.section_index = i
            vertex = Vertex(index=i)
            (
                vertex.position.x,
                vertex.position.y,
                vertex.position.z,
                vertex.normal.x,
                vertex.normal.y,
                vertex.normal.z,
                vertex.uv.x,
                vertex.uv.y,
            ) = self.unpack(
                self.read_by_format[Vertex].unpack, self.read_by_format[Vertex].size
            )

            for _ in range(model.setting.extended_uv_count):
                vertex.extended_uvs.append(self.read_MVector4D())

            vertex.deform = self.read_deform()
            vertex.edge_factor = self.read_float()
            model.vertices.append(vertex)

            logger.count(
                "頂点データ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=10000,
            )

        model.vertices.sort_indexes()

    def read_deform(self) -> TDeform:
        """ウェイト変形方式に応じたデフォーム読み込み"""
        deform_type = self.read_variant(DeformType, self.read_byte())
        if DeformType.BDEF1 == deform_type:
            return Bdef1(self.read_bone_index())
        elif DeformType.BDEF2 == deform_type:
            return Bdef2(self.read_bone_index(), self.read_bone_index(), self.read_float())
        elif DeformType.SDEF == deform_type:
            return Sdef(
                self.read_bone_index(),
                self.read_bone_index(),
                self.read_float(),
                self.read_MVector3D(),
                self.read_MVector3D(),
                self.read_MVector3D(),
            )

        indexes = [self.read_bone_index() for _ in range(4)]
        weights = [self.read_float() for _ in range(4)]
        if DeformType.BDEF4 == deform_type:
            return Bdef4(*indexes, *weights)
        return Qdef(*indexes, *weights)

    def read_indices(self, model: PmxModel):
        """面データ読み込み"""
        faces_vertex_count = self.read_count("indices")
        for i in range(faces_vertex_count):
            self.section_index = i
            model.indices.append(self.read_vertex_index())

            logger.count(
                "面データ読み取り",
                index=i,
                total_index_count=faces_vertex_count,
                display_block=30000,
            )

    def read_textures(self, model: PmxModel):
        """テクスチャデータ読み込み"""
        total_index_count = self.read_count("textures")
        for i in range(total_index_count):
            self.section_index = i
            texture = Texture(i, self.read_text())
            model.textures.append(texture)

            logger.count(
                "テクスチャデータ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=1000,
            )

        model.textures.sort_indexes()

    def read_materials(self, model: PmxModel):
        """材質データ読み込み"""
        total_index_count = self.read_count("materials")
        for i in range(total_index_count):
            self.section_index = i
            material = Material(index=i)
            material.name = self.read_text()
            material.english_name = self.read_text()

            (
                material.diffuse.x,
                material.diffuse.y,
                material.diffuse.z,
                material.diffuse.w,
                material.specular.x,
                material.specular.y,
                material.specular.z,
                material.specular_factor,
                material.ambient.x,
                material.ambient.y,
                material.ambient.z,
                draw_flg,
                material.edge_color.x,
                material.edge_color.y,
                material.edge_color.z,
                material.edge_color.w,
                material.edge_size,
                material.texture_index,
                material.sphere_texture_index,
                sphere_mode,
                toon_sharing_flg,
            ) = self.unpack(
                self.read_by_format[Material].unpack, self.read_by_format[Material].size
            )

            material.draw_flg = DrawFlg(draw_flg)
            material.sphere_mode = self.read_variant(SphereMode, sphere_mode)
            material.toon_sharing_flg = self.read_variant(ToonSharing, toon_sharing_flg)

            if material.toon_sharing_flg == ToonSharing.INDIVIDUAL:
                # 個別の場合、テクスチャINDEX
                material.toon_texture_index = self.read_texture_index()
            else:
                # 共有の場合、0-9の共有テクスチャINDEX
                material.toon_texture_index = self.read_byte()
            material.comment = self.read_text()
            material.vertices_count = self.read_int()
            model.materials.append(material)

            logger.count(
                "材質データ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=1000,
            )

        model.materials.sort_indexes()

    def read_bones(self, model: PmxModel):
        """ボーンデータ読み込み"""
        total_index_count = self.read_count("bones")
        for i in range(total_index_count):
            self.section_index = i
            bone = Bone(index=i)
            bone.name = self.read_text()
            bone.english_name = self.read_text()
            bone.position = self.read_MVector3D()
            bone.parent_index = self.read_bone_index()
            bone.layer = self.read_int()
            bone_flg = BoneFlg(self.read_ushort())
            # 後続データの有無に関するフラグは各グループで持つ
            bone.bone_flg = BoneFlg(int(bone_flg) & ~int(BONE_FIELD_FLAGS))

            if BoneFlg.TAIL_IS_BONE in bone_flg:
                bone.tail_index = self.read_bone_index()
            else:
                bone.tail_position = self.read_MVector3D()

            is_rotation = BoneFlg.IS_EXTERNAL_ROTATION in bone_flg
            is_translation = BoneFlg.IS_EXTERNAL_TRANSLATION in bone_flg
            if is_rotation or is_translation:
                bone.effect = BoneEffect(
                    index=self.read_bone_index(),
                    factor=self.read_float(),
                    is_rotation=is_rotation,
                    is_translation=is_translation,
                )

            if BoneFlg.HAS_FIXED_AXIS in bone_flg:
                bone.fixed_axis = self.read_MVector3D()

            if BoneFlg.HAS_LOCAL_COORDINATE in bone_flg:
                bone.local_axis = BoneLocalAxis(
                    self.read_MVector3D(), self.read_MVector3D()
                )

            if BoneFlg.IS_EXTERNAL_PARENT_DEFORM in bone_flg:
                bone.external_key = self.read_int()

            if BoneFlg.IS_IK in bone_flg:
                ik = Ik()
                ik.bone_index = self.read_bone_index()
                ik.loop_count = self.read_int()
                ik.unit_rotation = self.read_float()
                for _i in range(self.read_int()):
                    ik_link = IkLink()
                    ik_link.bone_index = self.read_bone_index()
                    ik_link.angle_limit = self.read_variant(Switch, self.read_byte())
                    if ik_link.angle_limit:
                        ik_link.min_angle_limit = self.read_MVector3D()
                        ik_link.max_angle_limit = self.read_MVector3D()
                    ik.links.append(ik_link)
                bone.ik = ik

            model.bones.append(bone)

            logger.count(
                "ボーンデータ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=1000,
            )

        model.bones.sort_indexes()

    def read_morphs(self, model: PmxModel):
        """モーフデータ読み込み"""
        total_index_count = self.read_count("morphs")
        for i in range(total_index_count):
            self.section_index = i
            morph = Morph(index=i)
            morph.name = self.read_text()
            morph.english_name = self.read_text()
            morph.panel = self.read_variant(MorphPanel, self.read_byte())
            morph.morph_type = self.read_variant(MorphType, self.read_byte())

            for _ in range(self.read_int()):
                if morph.morph_type == MorphType.GROUP:
                    morph.offsets.append(
                        GroupMorphOffset(self.read_morph_index(), self.read_float())
                    )
                elif morph.morph_type == MorphType.VERTEX:
                    morph.offsets.append(
                        VertexMorphOffset(
                            self.read_vertex_index(), self.read_MVector3D()
                        )
                    )
                elif morph.morph_type == MorphType.BONE:
                    morph.offsets.append(
                        BoneMorphOffset(
                            self.read_bone_index(),
                            self.read_MVector3D(),
                            self.read_MQuaternion(),
                        ),
                    )
                elif morph.morph_type in [
                    MorphType.UV,
                    MorphType.EXTENDED_UV1,
                    MorphType.EXTENDED_UV2,
                    MorphType.EXTENDED_UV3,
                    MorphType.EXTENDED_UV4,
                ]:
                    morph.offsets.append(
                        UvMorphOffset(self.read_vertex_index(), self.read_MVector4D())
                    )
                elif morph.morph_type == MorphType.MATERIAL:
                    morph.offsets.append(
                        MaterialMorphOffset(
                            self.read_material_index(),
                            self.read_variant(MaterialMorphCalcMode, self.read_byte()),
                            self.read_MVector4D(),
                            self.read_MVector3D(),
                            self.read_float(),
                            self.read_MVector3D(),
                            self.read_MVector4D(),
                            self.read_float(),
                            self.read_MVector4D(),
                            self.read_MVector4D(),
                            self.read_MVector4D(),
                        ),
                    )
                elif morph.morph_type == MorphType.FLIP:
                    morph.offsets.append(
                        FlipMorphOffset(self.read_morph_index(), self.read_float())
                    )
                elif morph.morph_type == MorphType.IMPULSE:
                    morph.offsets.append(
                        ImpulseMorphOffset(
                            self.read_rigidbody_index(),
                            self.read_variant(Switch, self.read_byte()),
                            self.read_MVector3D(),
                            self.read_MVector3D(),
                        )
                    )

            model.morphs.append(morph)

            logger.count(
                "モーフデータ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=500,
            )

        model.morphs.sort_indexes()

    def read_display_slots(self, model: PmxModel):
        """表示枠データ読み込み"""
        total_index_count = self.read_count("display_slots")
        for i in range(total_index_count):
            self.section_index = i
            display_slot = DisplaySlot(index=i)
            display_slot.name = self.read_text()
            display_slot.english_name = self.read_text()
            display_slot.special_flg = self.read_variant(Switch, self.read_byte())
            for _i in range(self.read_int()):
                reference = DisplaySlotReference()
                reference.display_type = self.read_variant(
                    DisplayType, self.read_byte()
                )
                if reference.display_type == DisplayType.BONE:
                    reference.display_index = self.read_bone_index()
                else:
                    reference.display_index = self.read_morph_index()
                display_slot.references.append(reference)

            model.display_slots.append(display_slot)

            logger.count(
                "表示枠データ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=1000,
            )

        model.display_slots.sort_indexes()

    def read_rigidbodies(self, model: PmxModel):
        """剛体データ読み込み"""
        total_index_count = self.read_count("rigidbodies")
        for i in range(total_index_count):
            self.section_index = i
            rigidbody = RigidBody(index=i)
            rigidbody.name = self.read_text()
            rigidbody.english_name = self.read_text()

            (
                rigidbody.bone_index,
                rigidbody.collision_group,
                no_collision_group,
                shape_type,
                rigidbody.shape_size.x,
                rigidbody.shape_size.y,
                rigidbody.shape_size.z,
                rigidbody.shape_position.x,
                rigidbody.shape_position.y,
                rigidbody.shape_position.z,
                rigidbody.shape_rotation.x,
                rigidbody.shape_rotation.y,
                rigidbody.shape_rotation.z,
                rigidbody.param.mass,
                rigidbody.param.linear_damping,
                rigidbody.param.angular_damping,
                rigidbody.param.restitution,
                rigidbody.param.friction,
                mode,
            ) = self.unpack(
                self.read_by_format[RigidBody].unpack,
                self.read_by_format[RigidBody].size,
            )

            rigidbody.no_collision_group = RigidBodyCollisionGroup(no_collision_group)
            rigidbody.shape_type = self.read_variant(RigidBodyShape, shape_type)
            rigidbody.mode = self.read_variant(RigidBodyMode, mode)

            model.rigidbodies.append(rigidbody)

            logger.count(
                "剛体データ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=1000,
            )

        model.rigidbodies.sort_indexes()

    def read_joints(self, model: PmxModel):
        """ジョイントデータ読み込み"""
        total_index_count = self.read_count("joints")
        for i in range(total_index_count):
            self.section_index = i
            joint = Joint(index=i)

            joint.name = self.read_text()
            joint.english_name = self.read_text()
            (
                joint_type,
                joint.rigidbody_index_a,
                joint.rigidbody_index_b,
                joint.position.x,
                joint.position.y,
                joint.position.z,
                joint.rotation.x,
                joint.rotation.y,
                joint.rotation.z,
                joint.param.translation_limit_min.x,
                joint.param.translation_limit_min.y,
                joint.param.translation_limit_min.z,
                joint.param.translation_limit_max.x,
                joint.param.translation_limit_max.y,
                joint.param.translation_limit_max.z,
                joint.param.rotation_limit_min.x,
                joint.param.rotation_limit_min.y,
                joint.param.rotation_limit_min.z,
                joint.param.rotation_limit_max.x,
                joint.param.rotation_limit_max.y,
                joint.param.rotation_limit_max.z,
                joint.param.spring_constant_translation.x,
                joint.param.spring_constant_translation.y,
                joint.param.spring_constant_translation.z,
                joint.param.spring_constant_rotation.x,
                joint.param.spring_constant_rotation.y,
                joint.param.spring_constant_rotation.z,
            ) = self.unpack(
                self.read_by_format[Joint].unpack,
                self.read_by_format[Joint].size,
            )

            joint.joint_type = self.read_variant(JointType, joint_type)

            model.joints.append(joint)

            logger.count(
                "ジョイントデータ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=1000,
            )

        model.joints.sort_indexes()

    def read_soft_bodies(self, model: PmxModel):
        """ソフトボディデータ読み込み"""
        total_index_count = self.read_count("soft_bodies")
        for i in range(total_index_count):
            self.section_index = i
            soft_body = SoftBody(index=i)
            soft_body.name = self.read_text()
            soft_body.english_name = self.read_text()
            soft_body.shape_type = self.read_variant(SoftBodyShape, self.read_byte())
            soft_body.material_index = self.read_material_index()
            soft_body.collision_group = self.read_byte()
            soft_body.no_collision_group = RigidBodyCollisionGroup(self.read_ushort())
            soft_body.flg = SoftBodyFlg(self.read_byte())
            soft_body.b_link_distance = self.read_int()
            soft_body.cluster_count = self.read_int()
            soft_body.mass = self.read_float()
            soft_body.collision_margin = self.read_float()
            soft_body.aero_model = self.read_variant(SoftBodyAeroModel, self.read_int())

            config = soft_body.config
            (
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
            ) = self.unpack(Struct("<12f").unpack_from, 4 * 12)

            cluster = soft_body.cluster
            (
                cluster.srhr_cl,
                cluster.skhr_cl,
                cluster.sshr_cl,
                cluster.sr_splt_cl,
                cluster.sk_splt_cl,
                cluster.ss_splt_cl,
            ) = self.unpack(Struct("<6f").unpack_from, 4 * 6)

            iteration = soft_body.iteration
            (
                iteration.v_it,
                iteration.p_it,
                iteration.d_it,
                iteration.c_it,
            ) = self.unpack(Struct("<4i").unpack_from, 4 * 4)

            material = soft_body.material
            (
                material.lst,
                material.ast,
                material.vst,
            ) = self.unpack(Struct("<3f").unpack_from, 4 * 3)

            for _i in range(self.read_int()):
                soft_body.anchors.append(
                    SoftBodyAnchor(
                        self.read_rigidbody_index(),
                        self.read_vertex_index(),
                        self.read_variant(Switch, self.read_byte()),
                    )
                )

            for _i in range(self.read_int()):
                soft_body.pin_vertex_indexes.append(self.read_vertex_index())

            model.soft_bodies.append(soft_body)

            logger.count(
                "ソフトボディデータ読み取り",
                index=i,
                total_index_count=total_index_count,
                display_block=1000,
            )

        model.soft_bodies.sort_indexes()

    def define_read_index(
        self, index_format: IndexFormat
    ) -> tuple[Callable[[], int], IndexFormat]:
        """
        INDEX読み取り定義

        頂点は符号なし、それ以外は符号あり(-1 は参照なし)で読み取る

        Parameters
        ----------
        index_format : IndexFormat
            INDEXの種別とサイズ

        Returns
        -------
        function
            読み取り定義関数
        """
        unpack_type = index_format.unpack_type

        def read_index() -> int:
            return int(self.read_value(unpack_type))

        return read_index, index_format
