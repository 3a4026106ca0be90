from dataclasses import asdict, dataclass
from typing import Optional


@dataclass
class Professional:
    id: str
    name: str
    social_name: Optional[str] = None
    role: Optional[str] = None              # 간호사 / 간호조무사 / 돌봄
    profession_code: Optional[str] = None
    active: bool = True
    email: Optional[str] = None
    phone: Optional[str] = None
    color: Optional[str] = None             # 달력 칩 색상 (#RRGGBB)
    is_substitute: bool = False             # 대체 인력 여부

    @property
    def display_name(self) -> str:
        return (self.social_name or self.name or "").strip()

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "Professional":
        return Professional(
            id=str(data["id"]),
            name=data.get("name", ""),
            social_name=data.get("social_name"),
            role=data.get("role"),
            profession_code=data.get("profession_code"),
            active=bool(data.get("active", True)),
            email=data.get("email"),
            phone=data.get("phone"),
            color=data.get("color"),
            is_substitute=bool(data.get("is_substitute", False)),
        )
