"""Playback queue controller.

Hey future me - this owns WHAT plays next, the engine owns HOW it sounds. The
engine is a black box behind IPlaybackEngine with at most one loaded sound.

Rules worth remembering:
- The list we navigate is the explicit queue if there is one, else the whole
  library in library order.
- repeat ONE replays the current track on skip_next (and on natural end).
- shuffle picks a uniformly random index (may repeat the same track - that's
  what the app always did, it's not a bug).
- End of list without repeat ALL is a silent no-op.
- A track that fails to load is logged and left as current; we do NOT jump to
  the next one automatically.
- Tracks without a uri (demo library) "play" without touching the engine.
"""

import logging
import random
from collections.abc import Iterable, Sequence

from sonora.domain.entities import Album, PlaybackState, RepeatMode, Track
from sonora.domain.exceptions import PlaybackError
from sonora.domain.ports import IPlaybackEngine

logger = logging.getLogger(__name__)

# skip_previous restarts the current track instead when we're past this point.
RESTART_THRESHOLD_SECONDS = 3.0

_REPEAT_CYCLE = {
    RepeatMode.OFF: RepeatMode.ALL,
    RepeatMode.ALL: RepeatMode.ONE,
    RepeatMode.ONE: RepeatMode.OFF,
}


class PlaybackQueueController:
    """Queue navigation plus play/pause/seek on top of a playback engine."""

    def __init__(
        self,
        engine: IPlaybackEngine,
        rng: random.Random | None = None,
        library: Sequence[Track] = (),
    ) -> None:
        self.engine = engine
        self._rng = rng or random.Random()

        self.state = PlaybackState.IDLE
        self.current_track: Track | None = None
        self.position = 0.0
        self.duration = 0.0
        self.shuffle = False
        self.repeat_mode = RepeatMode.OFF
        self.queue: tuple[Track, ...] = ()
        self.library: tuple[Track, ...] = tuple(library)
        self.last_error: PlaybackError | None = None

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    def set_library(self, tracks: Iterable[Track]) -> None:
        """Replace the library list (used when no explicit queue is set).

        The current track is refreshed to its newest value so enrichment
        updates (title, artwork) show up for what's playing.
        """
        self.library = tuple(tracks)
        if self.current_track is not None:
            refreshed = next(
                (t for t in self.library if t.id == self.current_track.id), None
            )
            if refreshed is not None:
                self.current_track = refreshed

    def _active_list(self) -> tuple[Track, ...]:
        return self.queue if self.queue else self.library

    def _current_index(self, tracks: Sequence[Track]) -> int:
        if self.current_track is None:
            return -1
        for index, track in enumerate(tracks):
            if track.id == self.current_track.id:
                return index
        return -1

    async def play(self, track: Track) -> bool:
        """Stop whatever is loaded and start ``track``.

        Returns:
            True when playback started, False when the engine failed (logged)
        """
        try:
            await self.engine.unload()
            self.current_track = track
            self.position = 0.0
            self.duration = track.duration

            if track.uri:
                await self.engine.load(track.uri)
        except Exception as e:
            self.last_error = PlaybackError(track.uri, str(e))
            logger.error("Error playing track %s: %s", track.id, self.last_error.message)
            return False

        self.last_error = None
        self.state = PlaybackState.PLAYING
        logger.debug("Playing %s (%s)", track.id, track.title)
        return True

    async def pause(self) -> None:
        if self.state != PlaybackState.PLAYING:
            return
        if self.current_track is not None and self.current_track.uri:
            await self.engine.pause()
        self.state = PlaybackState.PAUSED

    async def resume(self) -> None:
        if self.state != PlaybackState.PAUSED:
            return
        if self.current_track is not None and self.current_track.uri:
            await self.engine.resume()
        self.state = PlaybackState.PLAYING

    async def toggle_play_pause(self) -> None:
        if self.state == PlaybackState.PLAYING:
            await self.pause()
        elif self.state == PlaybackState.PAUSED:
            await self.resume()

    async def seek(self, position: float) -> None:
        """Jump to ``position`` seconds in the current track."""
        position = max(0.0, position)
        self.position = position
        if self.current_track is not None and self.current_track.uri:
            await self.engine.seek(position)

    def update_position(self, position: float) -> None:
        """Record the engine-reported position (no engine call)."""
        self.position = max(0.0, position)

    async def skip_next(self) -> Track | None:
        """Advance according to repeat/shuffle.

        Returns:
            The track we tried to play, or None when nothing happened
        """
        tracks = self._active_list()
        if not tracks:
            return None

        if self.repeat_mode == RepeatMode.ONE and self.current_track is not None:
            target = self.current_track
        elif self.shuffle:
            target = tracks[self._rng.randrange(len(tracks))]
        else:
            next_index = self._current_index(tracks) + 1
            if next_index >= len(tracks):
                if self.repeat_mode != RepeatMode.ALL:
                    return None
                next_index = 0
            target = tracks[next_index]

        await self.play(target)
        return target

    async def skip_previous(self) -> Track | None:
        """Restart the current track, or step back one.

        Returns:
            The track we tried to play, or None when we only restarted/no-op'd
        """
        if self.position > RESTART_THRESHOLD_SECONDS:
            await self.seek(0.0)
            return None

        tracks = self._active_list()
        if not tracks:
            return None

        prev_index = self._current_index(tracks) - 1
        if prev_index < 0:
            prev_index = len(tracks) - 1 if self.repeat_mode == RepeatMode.ALL else 0
        target = tracks[prev_index]
        await self.play(target)
        return target

    async def on_track_finished(self) -> Track | None:
        """Natural end of the current track - same rules as skip_next."""
        return await self.skip_next()

    def toggle_shuffle(self) -> bool:
        self.shuffle = not self.shuffle
        return self.shuffle

    def cycle_repeat(self) -> RepeatMode:
        """off -> all -> one -> off"""
        self.repeat_mode = _REPEAT_CYCLE[self.repeat_mode]
        return self.repeat_mode

    async def play_playlist(self, tracks: Sequence[Track]) -> None:
        """Replace the queue wholesale and start its first track."""
        self.queue = tuple(tracks)
        if self.queue:
            await self.play(self.queue[0])

    async def play_album(self, album: Album) -> None:
        await self.play_playlist(album.tracks)

    async def stop(self) -> None:
        """Release the engine (shutdown)."""
        await self.engine.unload()
        self.state = PlaybackState.IDLE
        self.position = 0.0


__all__ = ["RESTART_THRESHOLD_SECONDS", "PlaybackQueueController"]
