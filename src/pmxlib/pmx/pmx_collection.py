import os

from pmxlib.core.base import BaseModel
from pmxlib.core.collection import BaseIndexDictModel, BaseIndexNameDictModel
from pmxlib.core.logger import MLogger
from pmxlib.pmx.pmx_part import (
    Bone,
    DisplaySlot,
    Joint,
    Material,
    Morph,
    MorphPanel,
    MorphType,
    RigidBody,
    SoftBody,
    Texture,
    Vertex,
)
from pmxlib.pmx.pmx_setting import PmxSetting

logger = MLogger(os.path.basename(__file__))
__ = logger.get_text


class Vertices(BaseIndexDictModel[Vertex]):
    """
    頂点リスト
    """

    def __init__(self) -> None:
        super().__init__()


class Textures(BaseIndexNameDictModel[Texture]):
    """
    テクスチャリスト
    """

    def __init__(self) -> None:
        super().__init__()


class Materials(BaseIndexNameDictModel[Material]):
    """
    材質リスト
    """

    def __init__(self) -> None:
        super().__init__()

    @property
    def vertices_count(self) -> int:
        """全材質の面(頂点)数合計"""
        return sum(m.vertices_count for m in self.data.values())


class Bones(BaseIndexNameDictModel[Bone]):
    """
    ボーンリスト
    """

    def __init__(self) -> None:
        super().__init__()

    def exists(self, *bone_names: str) -> bool:
        """指定されたボーン名が全て存在しているか"""
        return all(bone_name in self._names for bone_name in bone_names)


class Morphs(BaseIndexNameDictModel[Morph]):
    """
    モーフリスト
    """

    def __init__(self) -> None:
        super().__init__()

    def filter_by_type(self, *keys: MorphType) -> list[Morph]:
        """モーフ種別にあったモーフリスト"""
        return [v for v in self if v.morph_type in keys]

    def filter_by_panel(self, *keys: MorphPanel) -> list[Morph]:
        """表示枠にあったモーフリスト"""
        return [v for v in self if v.panel in keys]


class DisplaySlots(BaseIndexNameDictModel[DisplaySlot]):
    """
    表示枠リスト
    """

    def __init__(self) -> None:
        super().__init__()


class RigidBodies(BaseIndexNameDictModel[RigidBody]):
    """
    剛体リスト
    """

    def __init__(self) -> None:
        super().__init__()


class Joints(BaseIndexNameDictModel[Joint]):
    """
    ジョイントリスト
    """

    def __init__(self) -> None:
        super().__init__()


class SoftBodies(BaseIndexNameDictModel[SoftBody]):
    """
    ソフトボディリスト
    """

    def __init__(self) -> None:
        super().__init__()


class PmxModel(BaseModel):
    """
    Pmxモデルデータ

    Parameters
    ----------
    signature : str, optional
        signature, by default "PMX "
    version : float, optional
        バージョン 2.0 or 2.1, by default 2.1
    setting : PmxSetting, optional
        設定データ列(エンコード方式・追加UV数・各INDEXサイズ), by default PmxSetting()
    model_name : str, optional
        モデル名, by default ""
    english_name : str, optional
        モデル名英, by default ""
    comment : str, optional
        コメント, by default ""
    english_comment : str, optional
        コメント英, by default ""
    indices : list[int]
        面を構成する頂点INDEX(3つで1面), by default []
    """

    __slots__ = (
        "signature",
        "version",
        "setting",
        "model_name",
        "english_name",
        "comment",
        "english_comment",
        "vertices",
        "indices",
        "textures",
        "materials",
        "bones",
        "morphs",
        "display_slots",
        "rigidbodies",
        "joints",
        "soft_bodies",
    )

    SIGNATURE = "PMX "

    def __init__(self, version: float = 2.1) -> None:
        super().__init__()
        self.signature: str = self.SIGNATURE
        self.version: float = version
        self.setting: PmxSetting = PmxSetting()
        self.model_name: str = ""
        self.english_name: str = ""
        self.comment: str = ""
        self.english_comment: str = ""
        self.vertices: Vertices = Vertices()
        self.indices: list[int] = []
        self.textures: Textures = Textures()
        self.materials: Materials = Materials()
        self.bones: Bones = Bones()
        self.morphs: Morphs = Morphs()
        self.display_slots: DisplaySlots = DisplaySlots()
        self.rigidbodies: RigidBodies = RigidBodies()
        self.joints: Joints = Joints()
        self.soft_bodies: SoftBodies = SoftBodies()

    @property
    def name(self) -> str:
        return self.model_name

    @property
    def has_soft_bodies(self) -> bool:
        """ソフトボディを出力するバージョンであるか"""
        return 2.1 <= round(self.version, 1)

    def log_summary(self) -> None:
        logger.info(
            "モデル: {n} (PMX {v:.1f}) 頂点: {vc}, 面: {fc}, 材質: {mc}, ボーン: {bc}, モーフ: {mo}, 剛体: {rc}, ジョイント: {jc}, ソフトボディ: {sc}",
            n=self.model_name,
            v=self.version,
            vc=len(self.vertices),
            fc=len(self.indices) // 3,
            mc=len(self.materials),
            bc=len(self.bones),
            mo=len(self.morphs),
            rc=len(self.rigidbodies),
            jc=len(self.joints),
            sc=len(self.soft_bodies),
        )
