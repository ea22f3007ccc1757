"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from crateimport.adapters.crate_api import CrateApiClient, CrateJobStream, decode_message
from crateimport.config.crate_api import get_crate_api_config
from crateimport.domain.importing import ImportSession, ImportStateMachine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from crateimport.config.crate_api import CrateApiConfig
    from crateimport.domain.importing import MatchedTrack
    from crateimport.domain.importing.state_machine import SignalListener


log = getLogger(__name__)


def build_import_session(
    *,
    token: str,
    config: CrateApiConfig | None = None,
    listener: SignalListener | None = None,
    api_client: CrateApiClient | None = None,
    stream: CrateJobStream | None = None,
) -> ImportSession:
    """Wire an import session to the crate backend."""

    effective_config = config or get_crate_api_config()
    effective_client = api_client or CrateApiClient(config=effective_config)
    machine = ImportStateMachine() if listener is None else ImportStateMachine(listener=listener)
    return ImportSession(
        open_stream=stream or CrateJobStream(config=effective_config),
        decode=decode_message,
        refresh_catalog=effective_client.fetch_records,
        token=token,
        machine=machine,
    )


def import_records(session: ImportSession, record_ids: Sequence[str]) -> ImportStateMachine:
    """Run a full import for ``record_ids`` and return the resulting state."""

    log.info(f"Starting Spotify import for {len(record_ids)} records")
    machine = asyncio.run(session.import_records(record_ids))
    log.info(f"Spotify import finished in state {machine.state}")
    return machine


def apply_selections(session: ImportSession) -> ImportStateMachine:
    """Apply the user's current match selections as a follow-up job."""

    selection = session.machine.selections()
    log.info(
        f"Applying {len(selection.matched_albums)} album and {len(selection.matched_tracks)} "
        f"track selections, {len(selection.unmatched_albums)} albums left unmatched"
    )
    machine = asyncio.run(session.apply_selections())
    log.info(f"Applying selections finished in state {machine.state}")
    return machine


def fetch_track_features(
    track: MatchedTrack,
    *,
    token: str,
    api_client: CrateApiClient | None = None,
) -> None:
    """Store Spotify audio features for a track matched by hand."""

    client = api_client or CrateApiClient()
    asyncio.run(client.fetch_track_features(track, token=token))
