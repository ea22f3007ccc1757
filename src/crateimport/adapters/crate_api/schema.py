"""Pydantic models describing the crate backend's payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CrateBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CandidatePayload(BaseModel):
    """A Spotify album or track offered by the matcher.

    Display fields (name, artists, images, release date, ...) vary by kind
    and are kept as extras so they survive the round trip to the apply job.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    selected: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class InexactAlbumMatchPayload(CrateBaseModel):
    record_id: str = Field(alias="recordID")
    matches: list[CandidatePayload] = Field(default_factory=list["CandidatePayload"])


class InexactTrackMatchPayload(CrateBaseModel):
    record_id: str = Field(alias="recordID")
    track_id: str = Field(alias="trackID")
    options: list[CandidatePayload] = Field(default_factory=list["CandidatePayload"])


class TerminalResultPayload(CrateBaseModel):
    inexact_album_matches: list[InexactAlbumMatchPayload] = Field(
        default_factory=list["InexactAlbumMatchPayload"], alias="inexactAlbumMatches"
    )
    inexact_track_matches: list[InexactTrackMatchPayload] = Field(
        default_factory=list["InexactTrackMatchPayload"], alias="inexactTrackMatches"
    )

    @field_validator("inexact_album_matches", "inexact_track_matches", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class ErrorResponse(CrateBaseModel):
    message: str | None = None


class AudioFeatures(CrateBaseModel):
    acousticness: float
    danceability: float
    duration_ms: int
    energy: float
    instrumentalness: float
    key: int
    liveness: float
    loudness: float
    mode: int
    speechiness: float
    tempo: float
    time_signature: int
    valence: float


class TrackPayload(CrateBaseModel):
    id: str = Field(alias="_id")
    title: str
    spotify_id: str | None = Field(default=None, alias="spotifyID")
    artists: str | None = None
    position: str | None = None
    duration: float | None = None
    bpm: float | None = None
    rpm: int = 33
    key: int | None = None
    mode: int | None = None
    genre: str | None = None
    time_signature_upper: int | None = Field(default=None, alias="timeSignatureUpper")
    time_signature_lower: int | None = Field(default=None, alias="timeSignatureLower")
    playable: bool = True
    audio_features: AudioFeatures | None = Field(default=None, alias="audioFeatures")


class RecordPayload(CrateBaseModel):
    id: str = Field(alias="_id")
    title: str
    artists: str | None = None
    label: str | None = None
    year: int | None = None
    catno: str | None = None
    cover: str | None = None
    spotify_id: str | None = Field(default=None, alias="spotifyID")
    tracks: list[TrackPayload] = Field(default_factory=list["TrackPayload"])
