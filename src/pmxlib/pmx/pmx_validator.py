import os
from typing import Iterable, Optional

from pmxlib.core.exception import MReferentialIntegrityException
from pmxlib.core.logger import MLogger
from pmxlib.pmx.pmx_collection import PmxModel
from pmxlib.pmx.pmx_part import (
    BoneMorphOffset,
    DisplayType,
    GroupMorphOffset,
    ImpulseMorphOffset,
    MaterialMorphOffset,
    ToonSharing,
    UvMorphOffset,
    VertexMorphOffset,
)
from pmxlib.pmx.pmx_setting import INDEX_WIDTHS, NO_INDEX, IndexKind, define_index_width

logger = MLogger(os.path.basename(__file__))
__ = logger.get_text


class PmxValidator:
    """
    PMXモデルの参照整合性チェック

    読み込み直後のモデルの他、編集したモデルを出力前にチェックする場合にも使う

    Parameters
    ----------
    model : PmxModel
        チェック対象モデル
    width_tolerance : Optional[int], optional
        INDEXサイズが要素数から求めた最小サイズより何段階大きければ警告するか, by default None
    """

    def __init__(self, model: PmxModel, width_tolerance: Optional[int] = None) -> None:
        self.model = model
        self.width_tolerance = width_tolerance
        self.counts = {
            IndexKind.VERTEX: len(model.vertices),
            IndexKind.TEXTURE: len(model.textures),
            IndexKind.MATERIAL: len(model.materials),
            IndexKind.BONE: len(model.bones),
            IndexKind.MORPH: len(model.morphs),
            IndexKind.RIGIDBODY: len(model.rigidbodies),
        }

    def validate(self) -> None:
        """
        全セクションのチェック

        Raises
        ------
        MReferentialIntegrityException
            最初に見つかった不正な参照
        """
        self.check_positions()
        self.check_indices()
        self.check_vertices()
        self.check_materials()
        self.check_bones()
        self.check_morphs()
        self.check_display_slots()
        self.check_rigidbodies()
        self.check_joints()
        self.check_soft_bodies()

        if self.width_tolerance is not None:
            self.check_index_widths()

    def check_reference(
        self, section: str, index: int, field: str, kind: IndexKind, value: int
    ) -> None:
        """参照なし(頂点以外)もしくは参照先の範囲内であるか"""
        if kind.is_nullable and NO_INDEX == value:
            return
        count = self.counts[kind]
        if not (0 <= value < count):
            raise MReferentialIntegrityException(
                "参照先が範囲外です field: {field}, value: {value}, count: {count}",
                section=section,
                index=index,
                field=field,
                value=value,
                count=count,
            )

    def check_positions(self) -> None:
        """各要素のINDEXが並び順と一致しているか"""
        sections: dict[str, Iterable] = {
            "vertices": self.model.vertices,
            "textures": self.model.textures,
            "materials": self.model.materials,
            "bones": self.model.bones,
            "morphs": self.model.morphs,
            "display_slots": self.model.display_slots,
            "rigidbodies": self.model.rigidbodies,
            "joints": self.model.joints,
            "soft_bodies": self.model.soft_bodies,
        }
        for section, elements in sections.items():
            for n, element in enumerate(elements):
                if n != element.index:
                    raise MReferentialIntegrityException(
                        "要素のINDEXが並び順と一致しません field: {field}, value: {value}",
                        section=section,
                        index=n,
                        field="index",
                        value=element.index,
                    )

    def check_indices(self) -> None:
        for n, vertex_index in enumerate(self.model.indices):
            self.check_reference(
                "indices", n, "vertex_index", IndexKind.VERTEX, vertex_index
            )

    def check_vertices(self) -> None:
        for vertex in self.model.vertices:
            for bone_index in vertex.deform.indexes:
                self.check_reference(
                    "vertices", vertex.index, "deform", IndexKind.BONE, int(bone_index)
                )

    def check_materials(self) -> None:
        for material in self.model.materials:
            self.check_reference(
                "materials",
                material.index,
                "texture_index",
                IndexKind.TEXTURE,
                material.texture_index,
            )
            self.check_reference(
                "materials",
                material.index,
                "sphere_texture_index",
                IndexKind.TEXTURE,
                material.sphere_texture_index,
            )
            if ToonSharing.INDIVIDUAL == material.toon_sharing_flg:
                self.check_reference(
                    "materials",
                    material.index,
                    "toon_texture_index",
                    IndexKind.TEXTURE,
                    material.toon_texture_index,
                )

        # 材質の面(頂点)数合計は面データ数と一致している
        vertices_count = self.model.materials.vertices_count
        if vertices_count != len(self.model.indices):
            raise MReferentialIntegrityException(
                "材質の頂点数合計が面データ数と一致しません field: {field}, value: {value}, count: {count}",
                section="materials",
                field="vertices_count",
                value=vertices_count,
                count=len(self.model.indices),
            )

    def check_bones(self) -> None:
        for bone in self.model.bones:
            self.check_reference(
                "bones", bone.index, "parent_index", IndexKind.BONE, bone.parent_index
            )
            if bone.tail_index is not None:
                self.check_reference(
                    "bones", bone.index, "tail_index", IndexKind.BONE, bone.tail_index
                )
            if bone.has_effect and bone.effect:
                self.check_reference(
                    "bones", bone.index, "effect.index", IndexKind.BONE, bone.effect.index
                )
            if bone.ik is not None:
                self.check_reference(
                    "bones", bone.index, "ik.bone_index", IndexKind.BONE, bone.ik.bone_index
                )
                for link in bone.ik.links:
                    self.check_reference(
                        "bones",
                        bone.index,
                        "ik.links.bone_index",
                        IndexKind.BONE,
                        link.bone_index,
                    )

    def check_morphs(self) -> None:
        for morph in self.model.morphs:
            for offset in morph.offsets:
                if isinstance(offset, (VertexMorphOffset, UvMorphOffset)):
                    self.check_reference(
                        "morphs",
                        morph.index,
                        "offsets.vertex_index",
                        IndexKind.VERTEX,
                        offset.vertex_index,
                    )
                elif isinstance(offset, BoneMorphOffset):
                    self.check_reference(
                        "morphs",
                        morph.index,
                        "offsets.bone_index",
                        IndexKind.BONE,
                        offset.bone_index,
                    )
                elif isinstance(offset, MaterialMorphOffset):
                    self.check_reference(
                        "morphs",
                        morph.index,
                        "offsets.material_index",
                        IndexKind.MATERIAL,
                        offset.material_index,
                    )
                elif isinstance(offset, GroupMorphOffset):
                    # フリップモーフも同じ
                    self.check_reference(
                        "morphs",
                        morph.index,
                        "offsets.morph_index",
                        IndexKind.MORPH,
                        offset.morph_index,
                    )
                elif isinstance(offset, ImpulseMorphOffset):
                    self.check_reference(
                        "morphs",
                        morph.index,
                        "offsets.rigidbody_index",
                        IndexKind.RIGIDBODY,
                        offset.rigidbody_index,
                    )

    def check_display_slots(self) -> None:
        for display_slot in self.model.display_slots:
            for reference in display_slot.references:
                self.check_reference(
                    "display_slots",
                    display_slot.index,
                    "references.display_index",
                    IndexKind.BONE
                    if DisplayType.BONE == reference.display_type
                    else IndexKind.MORPH,
                    reference.display_index,
                )

    def check_rigidbodies(self) -> None:
        for rigidbody in self.model.rigidbodies:
            self.check_reference(
                "rigidbodies",
                rigidbody.index,
                "bone_index",
                IndexKind.BONE,
                rigidbody.bone_index,
            )

    def check_joints(self) -> None:
        for joint in self.model.joints:
            self.check_reference(
                "joints",
                joint.index,
                "rigidbody_index_a",
                IndexKind.RIGIDBODY,
                joint.rigidbody_index_a,
            )
            self.check_reference(
                "joints",
                joint.index,
                "rigidbody_index_b",
                IndexKind.RIGIDBODY,
                joint.rigidbody_index_b,
            )

    def check_soft_bodies(self) -> None:
        for soft_body in self.model.soft_bodies:
            self.check_reference(
                "soft_bodies",
                soft_body.index,
                "material_index",
                IndexKind.MATERIAL,
                soft_body.material_index,
            )
            for anchor in soft_body.anchors:
                self.check_reference(
                    "soft_bodies",
                    soft_body.index,
                    "anchors.rigidbody_index",
                    IndexKind.RIGIDBODY,
                    anchor.rigidbody_index,
                )
                self.check_reference(
                    "soft_bodies",
                    soft_body.index,
                    "anchors.vertex_index",
                    IndexKind.VERTEX,
                    anchor.vertex_index,
                )
            for vertex_index in soft_body.pin_vertex_indexes:
                self.check_reference(
                    "soft_bodies",
                    soft_body.index,
                    "pin_vertex_indexes",
                    IndexKind.VERTEX,
                    vertex_index,
                )

    def check_index_widths(self) -> None:
        """
        INDEXサイズが要素数から求めた最小サイズより大きすぎないか

        エラーにはせず警告のみ出力する
        """
        for kind in IndexKind:
            stored_width = self.model.setting.index_size(kind)
            fit_width = define_index_width(self.counts[kind], kind)
            steps = INDEX_WIDTHS.index(stored_width) - INDEX_WIDTHS.index(fit_width)
            if self.width_tolerance is not None and self.width_tolerance < steps:
                logger.warning(
                    "{k}のINDEXサイズが要素数に対して大きすぎます 設定: {s}, 最小: {f}, 要素数: {c}",
                    k=kind.name,
                    s=stored_width,
                    f=fit_width,
                    c=self.counts[kind],
                )
