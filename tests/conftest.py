import pytest

from pmxlib.core.base import Encoding
from pmxlib.core.math import MQuaternion, MVector2D, MVector3D, MVector4D
from pmxlib.core.part import Switch
from pmxlib.pmx.pmx_collection import PmxModel
from pmxlib.pmx.pmx_part import (
    Bdef1,
    Bdef2,
    Bdef4,
    Bone,
    BoneEffect,
    BoneFlg,
    BoneLocalAxis,
    BoneMorphOffset,
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
    SoftBodyAnchor,
    SoftBodyFlg,
    SoftBodyShape,
    SphereMode,
    Texture,
    ToonSharing,
    UvMorphOffset,
    Vertex,
    VertexMorphOffset,
)
from pmxlib.pmx.pmx_reader import PmxReader
from pmxlib.pmx.pmx_writer import PmxWriter


def create_full_model(
    encoding: Encoding = Encoding.UTF_16_LE,
    index_sizes: tuple[int, int, int, int, int, int] = (1, 1, 1, 1, 1, 1),
    extended_uv_count: int = 1,
) -> PmxModel:
    """全セクション・全種別を含むモデル(値は全てfloat32で正確に表せるもの)"""
    model = PmxModel()
    model.setting.encoding = encoding
    model.setting.extended_uv_count = extended_uv_count
    model.setting.index_sizes = list(index_sizes)
    model.model_name = "テストモデル"
    model.english_name = "Test Model"
    model.comment = "コメント\r\n二行目"
    model.english_comment = "comment"

    deforms = [
        Bdef1(0),
        Bdef2(0, 1, 0.75),
        Bdef4(0, 1, 2, -1, 0.5, 0.25, 0.125, 0.125),
        Sdef(
            1,
            2,
            0.25,
            MVector3D(0.5, 1.0, 0.0),
            MVector3D(0.0, 2.0, 0.0),
            MVector3D(0.0, -2.0, 0.5),
        ),
        Qdef(2, 1, 0, 0, 0.5, 0.5, 0.0, 0.0),
    ]
    for n, deform in enumerate(deforms):
        vertex = Vertex()
        vertex.position = MVector3D(n, n * 0.5, -n)
        vertex.normal = MVector3D(0, 1, 0)
        vertex.uv = MVector2D(0.25 * n, 0.5)
        vertex.extended_uvs = [
            MVector4D(0.5, 0.25, n, 1) for _ in range(extended_uv_count)
        ]
        vertex.deform = deform
        vertex.edge_factor = 1.0
        model.vertices.append(vertex)

    model.indices = [0, 1, 2, 2, 3, 4]

    model.textures.append(Texture(name="tex/body.png"))
    model.textures.append(Texture(name="toon/個別トゥーン.bmp"))

    body = Material(name="体", english_name="body")
    body.diffuse = MVector4D(1, 0.5, 0.25, 1)
    body.specular = MVector3D(0.125, 0.125, 0.125)
    body.specular_factor = 5.0
    body.ambient = MVector3D(0.5, 0.5, 0.5)
    body.draw_flg = DrawFlg.DOUBLE_SIDED_DRAWING | DrawFlg.DRAWING_EDGE
    body.edge_color = MVector4D(0, 0, 0, 1)
    body.edge_size = 1.5
    body.texture_index = 0
    body.sphere_texture_index = -1
    body.sphere_mode = SphereMode.MULTIPLICATION
    body.toon_sharing_flg = ToonSharing.INDIVIDUAL
    body.toon_texture_index = 1
    body.comment = "memo"
    body.vertices_count = 3
    model.materials.append(body)

    hair = Material(name="髪", english_name="hair")
    hair.toon_sharing_flg = ToonSharing.SHARING
    hair.toon_texture_index = 3
    hair.vertices_count = 3
    model.materials.append(hair)

    center = Bone(name="センター", english_name="center")
    center.position = MVector3D(0, 8, 0)
    center.bone_flg = BoneFlg.CAN_ROTATE | BoneFlg.CAN_TRANSLATE | BoneFlg.IS_VISIBLE
    center.tail_position = MVector3D(0, -1, 0)
    model.bones.append(center)

    upper = Bone(name="上半身", english_name="upper body")
    upper.position = MVector3D(0, 10, 0)
    upper.parent_index = 0
    upper.layer = 1
    upper.bone_flg = BoneFlg.CAN_ROTATE | BoneFlg.IS_EXTERNAL_LOCAL
    upper.tail_index = 0
    upper.effect = BoneEffect(0, 0.5, is_rotation=True, is_translation=True)
    upper.fixed_axis = MVector3D(1, 0, 0)
    upper.local_axis = BoneLocalAxis(MVector3D(1, 0, 0), MVector3D(0, 0, 1))
    upper.external_key = 7
    model.bones.append(upper)

    leg_ik = Bone(name="左足ＩＫ", english_name="leg IK_L")
    leg_ik.parent_index = 0
    leg_ik.bone_flg = BoneFlg.CAN_ROTATE | BoneFlg.IS_AFTER_PHYSICS_DEFORM
    ik = Ik(bone_index=1)
    ik.loop_count = 40
    ik.unit_rotation = 0.5
    free_link = IkLink(bone_index=0)
    limited_link = IkLink(bone_index=1)
    limited_link.angle_limit = Switch.ON
    limited_link.min_angle_limit = MVector3D(-3, 0, 0)
    limited_link.max_angle_limit = MVector3D(-0.5, 0, 0)
    ik.links = [free_link, limited_link]
    leg_ik.ik = ik
    model.bones.append(leg_ik)

    group = Morph(name="グループ", english_name="group")
    group.panel = MorphPanel.OTHER_LOWER_RIGHT
    group.morph_type = MorphType.GROUP
    group.offsets = [GroupMorphOffset(1, 0.5), GroupMorphOffset(2, 1.0)]
    model.morphs.append(group)

    vertex_morph = Morph(name="あ", english_name="a")
    vertex_morph.panel = MorphPanel.LIP_UPPER_RIGHT
    vertex_morph.morph_type = MorphType.VERTEX
    vertex_morph.offsets = [VertexMorphOffset(4, MVector3D(0, 0.25, 0))]
    model.morphs.append(vertex_morph)

    bone_morph = Morph(name="ボーン", english_name="bone")
    bone_morph.morph_type = MorphType.BONE
    bone_morph.offsets = [
        BoneMorphOffset(1, MVector3D(0, 1, 0), MQuaternion(0.5, 0.5, 0.5, 0.5))
    ]
    model.morphs.append(bone_morph)

    uv_morph = Morph(name="UV", english_name="uv")
    uv_morph.morph_type = MorphType.EXTENDED_UV1
    uv_morph.offsets = [UvMorphOffset(0, MVector4D(0.5, 0, 0, 0.25))]
    model.morphs.append(uv_morph)

    material_morph = Morph(name="材質", english_name="material")
    material_morph.panel = MorphPanel.EYEBROW_LOWER_LEFT
    material_morph.morph_type = MorphType.MATERIAL
    material_morph.offsets = [
        MaterialMorphOffset(
            -1,
            MaterialMorphCalcMode.ADDITION,
            MVector4D(0, 0, 0, -1),
            MVector3D(0.5, 0.5, 0.5),
            2.0,
            MVector3D(0, 0, 0),
            MVector4D(1, 0, 0, 1),
            0.5,
            MVector4D(1, 1, 1, 1),
            MVector4D(0, 0, 0, 0),
            MVector4D(0.25, 0.25, 0.25, 0.25),
        )
    ]
    model.morphs.append(material_morph)

    flip = Morph(name="フリップ", english_name="flip")
    flip.morph_type = MorphType.FLIP
    flip.offsets = [FlipMorphOffset(1, 1.0)]
    model.morphs.append(flip)

    impulse = Morph(name="インパルス", english_name="impulse")
    impulse.morph_type = MorphType.IMPULSE
    impulse.offsets = [
        ImpulseMorphOffset(0, Switch.ON, MVector3D(0, 0, 2), MVector3D(1, 0, 0))
    ]
    model.morphs.append(impulse)

    root_slot = DisplaySlot(name="Root", english_name="Root")
    root_slot.special_flg = Switch.ON
    root_slot.references = [DisplaySlotReference(DisplayType.BONE, 0)]
    model.display_slots.append(root_slot)

    exp_slot = DisplaySlot(name="表情", english_name="Exp")
    exp_slot.special_flg = Switch.ON
    exp_slot.references = [
        DisplaySlotReference(DisplayType.MORPH, 1),
        DisplaySlotReference(DisplayType.MORPH, 0),
    ]
    model.display_slots.append(exp_slot)

    head = RigidBody(name="頭", english_name="head")
    head.bone_index = 1
    head.collision_group = 3
    head.no_collision_group = RigidBodyCollisionGroup(0xFFF0)
    head.shape_type = RigidBodyShape.CAPSULE
    head.shape_size = MVector3D(1, 2, 0)
    head.shape_position = MVector3D(0, 12, 0)
    head.shape_rotation = MVector3D(0.5, 0, 0)
    head.param.mass = 1.0
    head.param.linear_damping = 0.5
    head.param.angular_damping = 0.5
    head.param.restitution = 0.0
    head.param.friction = 0.5
    head.mode = RigidBodyMode.DYNAMIC_BONE
    model.rigidbodies.append(head)

    hair_body = RigidBody(name="髪", english_name="hair")
    hair_body.bone_index = -1
    hair_body.mode = RigidBodyMode.DYNAMIC
    model.rigidbodies.append(hair_body)

    joint = Joint(name="首", english_name="neck")
    joint.joint_type = JointType.SPRING_6DOF
    joint.rigidbody_index_a = 0
    joint.rigidbody_index_b = 1
    joint.position = MVector3D(0, 11, 0)
    joint.rotation = MVector3D(0, 0.5, 0)
    joint.param.translation_limit_min = MVector3D(-1, -1, -1)
    joint.param.translation_limit_max = MVector3D(1, 1, 1)
    joint.param.rotation_limit_min = MVector3D(-0.5, -0.5, -0.5)
    joint.param.rotation_limit_max = MVector3D(0.5, 0.5, 0.5)
    joint.param.spring_constant_translation = MVector3D(100, 0, 0)
    joint.param.spring_constant_rotation = MVector3D(0, 0, 50)
    model.joints.append(joint)

    hinge = Joint(name="ヒンジ", english_name="hinge")
    hinge.joint_type = JointType.HINGE
    hinge.rigidbody_index_a = 1
    hinge.rigidbody_index_b = -1
    model.joints.append(hinge)

    skirt = SoftBody(name="スカート", english_name="skirt")
    skirt.shape_type = SoftBodyShape.ROPE
    skirt.material_index = 1
    skirt.collision_group = 2
    skirt.no_collision_group = RigidBodyCollisionGroup.GROUP01
    skirt.flg = SoftBodyFlg.B_LINK | SoftBodyFlg.LINK
    skirt.b_link_distance = 2
    skirt.cluster_count = 4
    skirt.mass = 1.5
    skirt.collision_margin = 0.25
    skirt.config.vcf = 1.0
    skirt.config.ahr = 0.5
    skirt.cluster.ss_splt_cl = 0.5
    skirt.iteration.v_it = 1
    skirt.iteration.c_it = 4
    skirt.material.lst = 1.0
    skirt.material.vst = 0.25
    skirt.anchors = [SoftBodyAnchor(0, 3, Switch.ON), SoftBodyAnchor(1, 4, Switch.OFF)]
    skirt.pin_vertex_indexes = [0, 2]
    model.soft_bodies.append(skirt)

    return model


def encode(model: PmxModel, **kwargs) -> bytes:
    return PmxWriter(model, **kwargs).to_bytes()


def decode(data: bytes, **kwargs) -> PmxModel:
    return PmxReader(**kwargs).read_by_bytes(data)


@pytest.fixture
def full_model() -> PmxModel:
    return create_full_model()
