"""Built-in demo library.

Served when there is no device library to scan (or the scan blew up), so the
app always has something to browse and "play". Demo tracks have no uri - the
playback controller simulates them without touching the engine - and they are
already marked as fetched so enrichment never sends them to MusicBrainz.
"""

from sonora.domain.entities import Track

# (id, title, artist, album, duration, bitrate, format, sample_rate, bit_depth, file_size, filename)
_DEMO_ROWS = (
    ("1", "Midnight Drive", "Neon Pulse", "After Dark", 234, 320, "MP3", 44100, 16, 9360000, "midnight_drive.mp3"),
    ("2", "Ocean Waves", "Ambient Flow", "Serenity", 312, 1411, "FLAC", 44100, 24, 55000000, "ocean_waves.flac"),
    ("3", "Electric Soul", "Neon Pulse", "After Dark", 198, 256, "AAC", 48000, 16, 6336000, "electric_soul.m4a"),
    ("4", "Dawn Chorus", "Ambient Flow", "Serenity", 276, 1411, "FLAC", 96000, 24, 48800000, "dawn_chorus.flac"),
    ("5", "City Lights", "Synthwave Radio", "Retro Future", 245, 320, "MP3", 44100, 16, 9800000, "city_lights.mp3"),
    ("6", "Neon Rain", "Synthwave Radio", "Retro Future", 289, 320, "MP3", 44100, 16, 11560000, "neon_rain.mp3"),
    ("7", "Deep Blue", "Ambient Flow", "Horizons", 420, 2116, "FLAC", 96000, 24, 111000000, "deep_blue.flac"),
    ("8", "Pulse", "Neon Pulse", "Velocity", 210, 256, "AAC", 44100, 16, 6720000, "pulse.m4a"),
    ("9", "Starlight", "Cosmic Drift", "Nebula", 356, 1411, "FLAC", 44100, 16, 62600000, "starlight.flac"),
    ("10", "Solar Wind", "Cosmic Drift", "Nebula", 298, 128, "MP3", 44100, 16, 4768000, "solar_wind.mp3"),
    ("11", "Gravity", "Cosmic Drift", "Event Horizon", 267, 320, "MP3", 44100, 16, 10680000, "gravity.mp3"),
    ("12", "Echoes", "Synthwave Radio", "Digital Dreams", 332, 192, "AAC", 44100, 16, 7968000, "echoes.m4a"),
)


def demo_tracks() -> tuple[Track, ...]:
    """The twelve demo tracks, in library order."""
    return tuple(
        Track(
            id=track_id,
            uri="",
            title=title,
            artist=artist,
            album=album,
            duration=float(duration),
            format=audio_format,
            filename=filename,
            bitrate=bitrate,
            sample_rate=sample_rate,
            bit_depth=bit_depth,
            channels=2,
            file_size=file_size,
            metadata_fetched=True,
        )
        for (
            track_id,
            title,
            artist,
            album,
            duration,
            bitrate,
            audio_format,
            sample_rate,
            bit_depth,
            file_size,
            filename,
        ) in _DEMO_ROWS
    )


__all__ = ["demo_tracks"]
