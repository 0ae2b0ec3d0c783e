"""
MOODJOURNAL - Security Module
アクセストークンの検証

認証コードの発行・メール送信・トークン発行は認証サービス側の責務。
このサービスは同じ秘密鍵で署名された JWT から user_id を取り出すだけ。
"""
import logging
from typing import Optional

from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> Optional[str]:
    """JWTトークンをデコードしてユーザーIDを取得"""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm]
        )
    except JWTError as e:
        logger.info("Rejected access token: %s", e)
        return None
    return payload.get("sub")
