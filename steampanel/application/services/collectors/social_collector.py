"""Social collector — friends list presence and what friends are playing."""

import logging
from collections import Counter

from steampanel.application.interfaces import Endpoint, UpstreamClient
from steampanel.domain.entities import PERSONA_STATES, FriendActivity, SocialData

from .parsing import as_int, as_list, as_str, dig

logger = logging.getLogger(__name__)

SUMMARY_BATCH_SIZE = 100  # GetPlayerSummaries accepts at most 100 ids


class SocialCollector:
    def __init__(self, client: UpstreamClient, steam_id: str, *, activity_limit: int = 5):
        self._client = client
        self._steam_id = steam_id
        self._activity_limit = activity_limit

    async def collect(self) -> SocialData:
        data = await self._client.call(
            Endpoint.FRIEND_LIST, {"steamid": self._steam_id, "relationship": "friend"}
        )
        friend_ids = [
            steam_id
            for steam_id in (as_str(f.get("steamid")) for f in as_list(dig(data, "friendslist", "friends")))
            if steam_id
        ]
        if not friend_ids:
            return SocialData()

        summaries: list[dict] = []
        for start in range(0, len(friend_ids), SUMMARY_BATCH_SIZE):
            batch = friend_ids[start:start + SUMMARY_BATCH_SIZE]
            page = await self._client.call(
                Endpoint.PLAYER_SUMMARIES, {"steamids": ",".join(batch)}
            )
            summaries.extend(as_list(dig(page, "response", "players")))

        return self._aggregate(len(friend_ids), summaries)

    def _aggregate(self, total: int, summaries: list[dict]) -> SocialData:
        online: list[FriendActivity] = []
        for summary in summaries:
            state = as_int(summary.get("personastate"))
            game_id = as_int(summary.get("gameid"))
            if state == 0 and not game_id:
                continue
            online.append(
                FriendActivity(
                    steam_id=as_str(summary.get("steamid")) or "",
                    name=as_str(summary.get("personaname")) or "Unknown",
                    online_state=PERSONA_STATES.get(state, "Unknown"),
                    game_name=as_str(summary.get("gameextrainfo")) if game_id else None,
                    game_app_id=game_id,
                )
            )

        in_game = [f for f in online if f.game_app_id]
        popular = Counter(f.game_name for f in in_game if f.game_name).most_common(1)

        # In-game friends first, stable within each group
        ordered = sorted(online, key=lambda f: 0 if f.game_app_id else 1)

        logger.debug("Social aggregate — %d friends, %d online, %d in game", total, len(online), len(in_game))
        return SocialData(
            total_friends=total,
            friends_online=len(online),
            friends_in_game=len(in_game),
            friends_popular_game=popular[0][0] if popular else None,
            friends_activity=tuple(ordered[:self._activity_limit]),
        )
