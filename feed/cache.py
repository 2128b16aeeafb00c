import json
import uuid
from typing import Iterable, Optional

import redis


class FeedCache:
    """
    홈 피드 페이지 캐시.
    값은 게시글 id 목록과 total 만 저장하고, 응답 시 DB 에서 다시 읽어 집계값이 어긋나지 않게 한다.
    무효화는 사용자별 버전 키를 올리는 방식(이전 버전 키는 TTL 로 자연 소멸).
    """

    HOME_VER = "feed:home_ver:{user}"
    HOME_PAGE = "feed:home:{user}:v{ver}:p{page}:l{limit}"

    def __init__(self, url: str, ttl_sec: int = 60):
        self.r = redis.Redis.from_url(url, decode_responses=True)
        self.ttl = ttl_sec

    def home_ver(self, user_id: uuid.UUID) -> int:
        v = self.r.get(self.HOME_VER.format(user=str(user_id)))
        return int(v) if v else 1

    def bump_home_ver(self, user_ids: Iterable[uuid.UUID]) -> None:
        pipe = self.r.pipeline()
        for uid in user_ids:
            k = self.HOME_VER.format(user=str(uid))
            # 없으면 1로 세팅한 뒤, INCR → 최소 2가 되도록 보장
            pipe.setnx(k, 1)
            pipe.incr(k)
        pipe.execute()

    def get_home(self, user_id: uuid.UUID, ver: int, page: int, limit: int) -> Optional[dict]:
        raw = self.r.get(self.HOME_PAGE.format(user=str(user_id), ver=ver, page=page, limit=limit))
        return json.loads(raw) if raw else None

    def set_home(self, user_id: uuid.UUID, ver: int, page: int, limit: int, entry: dict) -> None:
        # ver 는 DB 조회 전에 읽은 값. 조회 중 bump 되었다면 옛 버전 키에 저장되어 다시 읽히지 않는다
        k = self.HOME_PAGE.format(user=str(user_id), ver=ver, page=page, limit=limit)
        self.r.setex(k, self.ttl, json.dumps(entry))
