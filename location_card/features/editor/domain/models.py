"""エディター機能のドメインモデル"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional
from urllib.parse import quote

from ...map.domain.models import MAX_ZOOM, MIN_ZOOM, MapStyle

DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1&destination={destination}"


class EditorState(str, Enum):
    """検索コントローラーの状態"""

    IDLE = "idle"
    SEARCHING = "searching"
    SUGGESTIONS_SHOWN = "suggestions_shown"
    ERROR = "error"


class SchemaType(str, Enum):
    """schema.org の種別"""

    PLACE = "Place"
    LOCAL_BUSINESS = "LocalBusiness"
    RESTAURANT = "Restaurant"
    STORE = "Store"
    TOURIST_ATTRACTION = "TouristAttraction"
    ORGANIZATION = "Organization"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "SchemaType":
        """値から取得（空・未知の値は Place）"""
        try:
            return cls(value) if value else cls.PLACE
        except ValueError:
            return cls.PLACE


@dataclass(frozen=True)
class LocationAttributes:
    """
    ブロックに保存される位置情報属性

    ユーザーの確定操作（候補の選択・クリア・パネルでの変更）でのみ更新される。
    is_set で (0, 0) を「未設定」と区別する。
    """

    address: str = ""
    latitude: float = 0.0  # 緯度
    longitude: float = 0.0  # 経度
    is_set: bool = False
    map_style: MapStyle = MapStyle.STREETS
    zoom_level: float = 14.0
    address_abbreviation: str = ""
    schema_type: SchemaType = SchemaType.PLACE
    schema_name: Optional[str] = None
    schema_description: Optional[str] = None
    schema_telephone: Optional[str] = None
    schema_website: Optional[str] = None
    schema_opening_hours: Optional[str] = None

    def __post_init__(self) -> None:
        if self.is_set or self.latitude or self.longitude:
            if not -90 <= self.latitude <= 90:
                raise ValueError(f"Invalid latitude: {self.latitude}")
            if not -180 <= self.longitude <= 180:
                raise ValueError(f"Invalid longitude: {self.longitude}")
        if not MIN_ZOOM <= self.zoom_level <= MAX_ZOOM:
            raise ValueError(f"Invalid zoom level: {self.zoom_level}")

    @property
    def center(self) -> tuple[float, float]:
        """(経度, 緯度)"""
        return (self.longitude, self.latitude)

    @property
    def directions_url(self) -> str:
        """経路案内のURL"""
        return DIRECTIONS_URL.format(destination=quote(self.address, safe=""))

    def cleared(self) -> "LocationAttributes":
        """位置情報を未設定に戻した属性を返す"""
        return replace(
            self,
            address="",
            latitude=0.0,
            longitude=0.0,
            is_set=False,
            address_abbreviation="",
        )

    def to_block_dict(self) -> dict[str, Any]:
        """ブロック属性（保存形式）に変換"""
        data: dict[str, Any] = {
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "isSet": self.is_set,
            "mapStyle": self.map_style.value,
            "zoomLevel": self.zoom_level,
            "addressAbbreviation": self.address_abbreviation,
            "schemaType": self.schema_type.value,
        }
        optional_fields = {
            "schemaName": self.schema_name,
            "schemaDescription": self.schema_description,
            "schemaTelephone": self.schema_telephone,
            "schemaWebsite": self.schema_website,
            "schemaOpeningHours": self.schema_opening_hours,
        }
        data.update({key: value for key, value in optional_fields.items() if value})
        return data

    @classmethod
    def from_block_dict(cls, data: dict[str, Any]) -> "LocationAttributes":
        """
        ブロック属性（保存形式）から生成

        isSet を持たない既存コンテンツは、座標が0以外なら設定済みとみなす
        """
        latitude = float(data.get("latitude") or 0)
        longitude = float(data.get("longitude") or 0)

        is_set = data.get("isSet")
        if is_set is None:
            is_set = latitude != 0 or longitude != 0

        try:
            map_style = MapStyle.from_value(data.get("mapStyle"))
        except ValueError:
            map_style = MapStyle.STREETS

        return cls(
            address=data.get("address") or "",
            latitude=latitude,
            longitude=longitude,
            is_set=bool(is_set),
            map_style=map_style,
            zoom_level=min(max(float(data.get("zoomLevel") or 14), MIN_ZOOM), MAX_ZOOM),
            address_abbreviation=data.get("addressAbbreviation") or "",
            schema_type=SchemaType.from_value(data.get("schemaType")),
            schema_name=data.get("schemaName") or None,
            schema_description=data.get("schemaDescription") or None,
            schema_telephone=data.get("schemaTelephone") or None,
            schema_website=data.get("schemaWebsite") or None,
            schema_opening_hours=data.get("schemaOpeningHours") or None,
        )
