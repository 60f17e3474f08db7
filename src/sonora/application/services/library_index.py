"""Album/Artist aggregation over the track list.

Albums are keyed by "{album}-{artist}" so two different artists' "Greatest Hits"
stay separate. Everything is recomputed from scratch - aggregates are cheap and
never persisted.
"""

from collections.abc import Sequence

from sonora.domain.entities import Album, Artist, Track


def album_key(track: Track) -> str:
    """Album identity for a track."""
    return f"{track.album}-{track.artist}"


def build_albums(tracks: Sequence[Track]) -> list[Album]:
    """Group tracks into albums in order of first discovery.

    Artwork (and year) is the first non-null value seen among the album's tracks.
    """
    albums: dict[str, Album] = {}
    for track in tracks:
        key = album_key(track)
        album = albums.get(key)
        if album is None:
            album = Album(
                id=key,
                name=track.album,
                artist=track.artist,
                artwork=track.artwork,
                year=track.year,
            )
            albums[key] = album
        album.tracks.append(track)
        if album.artwork is None and track.artwork:
            album.artwork = track.artwork
        if album.year is None and track.year:
            album.year = track.year
    return list(albums.values())


def build_artists(tracks: Sequence[Track], albums: Sequence[Album]) -> list[Artist]:
    """Group tracks into artists and attach their (deduplicated) albums.

    Artist artwork is the artwork of their first track; when that is missing the
    first album that has artwork fills it in.
    """
    artists: dict[str, Artist] = {}
    for track in tracks:
        artist = artists.get(track.artist)
        if artist is None:
            artist = Artist(id=track.artist, name=track.artist, artwork=track.artwork)
            artists[track.artist] = artist
        artist.track_count += 1

    for album in albums:
        artist = artists.get(album.artist)
        if artist is None or any(existing.id == album.id for existing in artist.albums):
            continue
        artist.albums.append(album)
        if artist.artwork is None and album.artwork:
            artist.artwork = album.artwork
    return list(artists.values())


class LibraryIndex:
    """Memoized albums/artists for the current track tuple.

    Recomputes only when handed a different tuple object (identity, not
    equality - track lists are replaced wholesale, never mutated).
    """

    def __init__(self) -> None:
        self._source: tuple[Track, ...] | None = None
        self._albums: list[Album] = []
        self._artists: list[Artist] = []

    def update(self, tracks: tuple[Track, ...]) -> None:
        if tracks is self._source:
            return
        self._source = tracks
        self._albums = build_albums(tracks)
        self._artists = build_artists(tracks, self._albums)

    @property
    def albums(self) -> list[Album]:
        return self._albums

    @property
    def artists(self) -> list[Artist]:
        return self._artists

    def find_album(self, album_id: str) -> Album | None:
        return next((album for album in self._albums if album.id == album_id), None)

    def find_artist(self, artist_id: str) -> Artist | None:
        return next((artist for artist in self._artists if artist.id == artist_id), None)


__all__ = ["LibraryIndex", "album_key", "build_albums", "build_artists"]
