import uuid
from datetime import datetime
from typing import Any, Optional

from vidya.schemas.common import CamelModel


class AchievementResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    icon: str
    category: str
    points: int
    requirements: Optional[Any] = None
    created_at: datetime


class UserAchievementResponse(AchievementResponse):
    earned_at: datetime
