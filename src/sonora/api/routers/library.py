"""Library browsing endpoints (tracks, albums, artists, rescan)."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from sonora.api.dependencies import get_library_service
from sonora.application.services.library_service import LibraryService
from sonora.domain.entities import Album, Artist, Track
from sonora.domain.value_objects.quality import (
    format_duration,
    quality_label,
    quality_tier,
)

router = APIRouter(prefix="/library", tags=["library"])


def _track_dict(track: Track) -> dict[str, Any]:
    return {
        "id": track.id,
        "title": track.title,
        "artist": track.artist,
        "album": track.album,
        "duration": track.duration,
        "durationText": format_duration(track.duration),
        "artwork": track.artwork,
        "format": track.format,
        "bitrate": track.bitrate,
        "sampleRate": track.sample_rate,
        "bitDepth": track.bit_depth,
        "channels": track.channels,
        "quality": quality_label(quality_tier(track.bitrate, track.format)),
        "metadataFetched": track.metadata_fetched,
    }


def _album_dict(album: Album, with_tracks: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": album.id,
        "name": album.name,
        "artist": album.artist,
        "artwork": album.artwork,
        "year": album.year,
        "trackCount": len(album.tracks),
    }
    if with_tracks:
        data["tracks"] = [_track_dict(track) for track in album.tracks]
    return data


def _artist_dict(artist: Artist) -> dict[str, Any]:
    return {
        "id": artist.id,
        "name": artist.name,
        "artwork": artist.artwork,
        "trackCount": artist.track_count,
        "albums": [_album_dict(album) for album in artist.albums],
    }


@router.get("/status")
async def library_status(
    library: LibraryService = Depends(get_library_service),
) -> dict[str, Any]:
    """Permission/loading state plus counts."""
    return {
        "hasPermission": library.has_permission,
        "isLoading": library.is_loading,
        "isDemo": library.is_demo,
        "enriching": library.pipeline.is_running,
        "tracks": len(library.tracks),
    }


@router.get("/tracks")
async def list_tracks(
    library: LibraryService = Depends(get_library_service),
) -> list[dict[str, Any]]:
    return [_track_dict(track) for track in library.tracks]


@router.get("/albums")
async def list_albums(
    library: LibraryService = Depends(get_library_service),
) -> list[dict[str, Any]]:
    return [_album_dict(album) for album in library.albums]


@router.get("/albums/{album_id}")
async def get_album(
    album_id: str,
    library: LibraryService = Depends(get_library_service),
) -> dict[str, Any]:
    album = library.find_album(album_id)
    if album is None:
        raise HTTPException(status_code=404, detail="Album not found")
    return _album_dict(album, with_tracks=True)


@router.get("/artists")
async def list_artists(
    library: LibraryService = Depends(get_library_service),
) -> list[dict[str, Any]]:
    return [_artist_dict(artist) for artist in library.artists]


@router.post("/scan")
async def scan_library(
    library: LibraryService = Depends(get_library_service),
) -> dict[str, Any]:
    """Rescan the device library and restart enrichment for new tracks."""
    tracks = await library.scan()
    return {"tracks": len(tracks), "isDemo": library.is_demo}
