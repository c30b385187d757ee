from typing import List, Optional

from src.infra.database import DatabaseManager


class PushTokenRepository:
    """Push tokens of user devices. One row per registration, duplicates allowed."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    async def register_token(
        self, owner: Optional[str], token: str, platform: Optional[str] = None
    ) -> None:
        await self.db.execute(
            "INSERT INTO push_tokens (user_email, platform, token) VALUES ($1, $2, $3)",
            owner,
            platform,
            token,
        )

    async def latest_tokens(self, limit: int = 1000) -> List[str]:
        rows = await self.db.fetch(
            "SELECT token FROM push_tokens ORDER BY id DESC LIMIT $1", limit
        )
        return [row["token"] for row in rows]
