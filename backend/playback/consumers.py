import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer

from history.continue_watching import build_continue_watching
from history.messages import PLAYER_EVENT, apply_player_message
from history.store import ProgressStore
from playback.navigator import EpisodeNavigator
from playback.session import PlaybackSession, SessionStateError
from playback.surface import WebsocketSurface
from providers.base import MediaDescriptor, PlaybackOptions, normalize_id

logger = logging.getLogger(__name__)


class PlayerConsumer(AsyncWebsocketConsumer):
    async def connect(self):
        self.viewer_id = self.scope["url_route"]["kwargs"]["viewer_id"]

        self.store = ProgressStore(self.viewer_id)
        self.surface = WebsocketSurface(self.send_json)
        self.session = PlaybackSession(
            self.surface,
            self.store,
            on_failure=self.playback_failed,
        )
        self.navigator = EpisodeNavigator(self.session, self.store)
        self.store.add_completion_listener(self.refresh_continue_watching)

        await self.accept()
        await self.send_state()

    async def disconnect(self, close_code):
        if not hasattr(self, "session"):
            return

        self.store.remove_completion_listener(self.refresh_continue_watching)
        await self.session.stop()

    async def send_json(self, payload: dict):
        await self.send(text_data=json.dumps(payload))

    async def send_error(self, code, message):
        await self.send_json({
            "type": "ERROR",
            "code": code,
            "message": message,
        })

    async def send_state(self):
        await self.send_json({
            "type": "PLAYBACK_STATE",
            **self.session.snapshot(),
        })

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or bytes_data or "")
        except (TypeError, ValueError):
            return

        if not isinstance(data, dict):
            return

        event_type = data.get("type")
        if not event_type:
            return

        # ---------------- PROGRESS ----------------
        if event_type == PLAYER_EVENT:
            await apply_player_message(self.store, data)
            return

        # ---------------- PLAYER LIFECYCLE ----------------
        if event_type == "PLAY":
            media = data.get("media")
            if not isinstance(media, dict):
                await self.send_error("invalid_media", "media is required")
                return

            try:
                descriptor = MediaDescriptor(
                    kind=media.get("kind"),
                    id=media.get("id"),
                    season=media.get("season"),
                    episode=media.get("episode"),
                    secondary_id=media.get("secondaryId"),
                )
            except ValueError as e:
                await self.send_error("invalid_media", str(e))
                return

            options = PlaybackOptions.from_mapping(data.get("options"))
            await self.session.start(descriptor, options, data.get("provider"))
            await self.send_state()
            return

        if event_type == "SWITCH_PROVIDER":
            try:
                await self.session.switch_provider(data.get("provider"))
            except SessionStateError as e:
                await self.send_error("no_session", str(e))
                return
            await self.send_state()
            return

        if event_type == "STOP":
            await self.session.stop()
            await self.send_state()
            return

        if event_type == "PLAYER_LOCATION":
            self.surface.report_location(data.get("handle"), data.get("location"))
            return

        # ---------------- EPISODES ----------------
        if event_type == "SELECT_SEASON":
            await self.select_season(data)
            return

        if event_type == "SELECT_EPISODE":
            try:
                await self.navigator.play_episode(data.get("season"), data.get("episode"))
            except ValueError as e:
                await self.send_error("no_show", str(e))
                return
            await self.send_state()
            return

    async def select_season(self, data):
        show = data.get("show")
        try:
            if show is not None and normalize_id(show) != self.navigator.show_id:
                seasons = await self.navigator.load_seasons(show)
                if seasons is None:
                    return
                await self.send_json({
                    "type": "SEASONS",
                    "show": self.navigator.show_id,
                    "seasons": [season.as_dict() for season in seasons],
                })

            season = data.get("season")
            if season is None:
                return

            episodes = await self.navigator.select_season(season)
        except ValueError as e:
            await self.send_error("invalid_season", str(e))
            return

        if episodes is None:
            return

        await self.send_json({
            "type": "EPISODES",
            "show": self.navigator.show_id,
            "season": self.navigator.selected_season,
            "episodes": [episode.as_dict() for episode in episodes],
        })

    # ---------- session / store callbacks ----------

    async def playback_failed(self, session):
        await self.send_state()

    async def refresh_continue_watching(self, entry):
        cards = await build_continue_watching(self.store)
        await self.send_json({
            "type": "CONTINUE_WATCHING",
            "items": [card.as_dict() for card in cards],
        })
