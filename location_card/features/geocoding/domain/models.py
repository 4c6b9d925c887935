"""ジオコーディング機能のドメインモデル"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class PlaceType(str, Enum):
    """プロバイダーが付与する地物の種別（並び順が候補の優先順位）"""

    ADDRESS = "address"
    POI = "poi"
    PLACE = "place"
    LOCALITY = "locality"
    NEIGHBORHOOD = "neighborhood"
    POSTCODE = "postcode"

    @classmethod
    def from_feature(cls, place_types: Optional[list[str]]) -> Optional["PlaceType"]:
        """地物の place_type 配列の先頭から取得（未知の種別はNone）"""
        if not place_types:
            return None
        try:
            return cls(place_types[0])
        except ValueError:
            return None


# 候補の並び替えに使う優先順位
PLACE_TYPE_PRIORITY: tuple[PlaceType, ...] = tuple(PlaceType)


@dataclass(frozen=True)
class GeocodeSuggestion:
    """検索候補（検索結果からのみ生成され、選択またはモーダルを閉じると破棄される）"""

    place_id: str
    place_name: str
    center: tuple[float, float]  # (経度, 緯度)
    place_type: Optional[PlaceType] = None

    @property
    def longitude(self) -> float:
        return self.center[0]

    @property
    def latitude(self) -> float:
        return self.center[1]

    @property
    def priority(self) -> int:
        """並び替え用の優先順位（未知の種別は最後）"""
        if self.place_type is None:
            return len(PLACE_TYPE_PRIORITY)
        return PLACE_TYPE_PRIORITY.index(self.place_type)

    @classmethod
    def from_feature(cls, feature: dict[str, Any]) -> "GeocodeSuggestion":
        """
        プロバイダーの地物（feature）から生成

        Raises:
            ValueError: center が不正・範囲外の場合
        """
        center = feature.get("center")
        if not isinstance(center, (list, tuple)) or len(center) < 2:
            raise ValueError(f"Feature has no usable center: {feature.get('id')}")

        longitude, latitude = float(center[0]), float(center[1])
        if not -180 <= longitude <= 180 or not -90 <= latitude <= 90:
            raise ValueError(
                f"Feature center out of range: {feature.get('id')} ({longitude}, {latitude})"
            )

        return cls(
            place_id=str(feature.get("id", "")),
            place_name=str(feature.get("place_name", "")),
            center=(longitude, latitude),
            place_type=PlaceType.from_feature(feature.get("place_type")),
        )


@dataclass(frozen=True)
class GeoLocation:
    """プロキシが返す正規化済みの位置情報"""

    address: str
    latitude: float  # 緯度
    longitude: float  # 経度

    def to_dict(self) -> dict[str, Any]:
        """レスポンス用の辞書に変換"""
        return {
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
