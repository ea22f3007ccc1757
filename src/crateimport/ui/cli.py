# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from crateimport.app import (
    apply_selections,
    build_import_session,
    fetch_track_features,
    import_records,
)
from crateimport.common import configure_logging, parse_log_level
from crateimport.config import ConfigurationError, get_crate_api_token
from crateimport.domain.importing import JobState, MatchedTrack

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from crateimport.domain.importing import (
        ImportStateMachine,
        MatchCandidate,
        MatchReconciliation,
    )

log = logging.getLogger(__name__)

type Prompt = Callable[[str], str]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Match crate records against Spotify")
    parser.add_argument(
        "--token",
        type=str,
        help="Crate API bearer token (defaults to $CRATE_API_TOKEN)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        help="Logging level (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import", help="Import Spotify data for records")
    importer.add_argument("record_ids", nargs="+", metavar="RECORD_ID")

    features = subparsers.add_parser(
        "features",
        help="Fetch audio features for a track matched by hand",
    )
    features.add_argument("record_id", metavar="RECORD_ID")
    features.add_argument("track_id", metavar="TRACK_ID")
    features.add_argument("spotify_id", metavar="SPOTIFY_ID")

    return parser.parse_args(list(argv))


def describe_candidate(candidate: MatchCandidate) -> str:
    name = candidate.metadata.get("name") or candidate.id
    artists = candidate.metadata.get("artists")
    if isinstance(artists, list) and artists:
        names = [a.get("name", "?") if isinstance(a, dict) else str(a) for a in artists]
        name = f"{name} - {', '.join(names)}"
    release_date = candidate.metadata.get("release_date")
    if release_date:
        name = f"{name} ({release_date})"
    return str(name)


def _choose(
    label: str,
    candidates: list[MatchCandidate],
    prompt: Prompt,
) -> MatchCandidate | None:
    print(label)
    for index, candidate in enumerate(candidates, start=1):
        print(f"  {index}) {describe_candidate(candidate)}")
    while True:
        answer = prompt(f"Choose 1-{len(candidates)} (blank to leave unmatched): ").strip()
        if not answer:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(candidates):
            return candidates[int(answer) - 1]
        print(f"Invalid choice: {answer}")


def _toggle_target(
    current: MatchCandidate | None, choice: MatchCandidate | None
) -> MatchCandidate | None:
    # The candidate to toggle so the group ends up holding ``choice`` or nothing.
    if choice is None:
        return current
    if choice is current:
        return None
    return choice


def resolve_matches(reconciliation: MatchReconciliation, prompt: Prompt = input) -> None:
    """Ask for one choice per match group and record it."""

    for group in reconciliation.album_matches:
        choice = _choose(f"Album matches for record {group.record_id}:", group.matches, prompt)
        target = _toggle_target(group.selected, choice)
        if target is not None:
            reconciliation.toggle_album_option(group.record_id, target.id)
    for group in reconciliation.track_matches:
        choice = _choose(
            f"Track matches for track {group.track_id} on record {group.record_id}:",
            group.options,
            prompt,
        )
        target = _toggle_target(group.selected, choice)
        if target is not None:
            reconciliation.toggle_track_option(group.track_id, target.id)


def run_import(
    record_ids: Sequence[str],
    *,
    token: str,
    prompt: Prompt = input,
) -> ImportStateMachine:
    session = build_import_session(token=token)
    machine = import_records(session, record_ids)
    while machine.state is JobState.AWAITING_RESOLUTION:
        resolve_matches(machine.reconciliation, prompt)
        machine = apply_selections(session)
    return machine


def _resolve_token(args: argparse.Namespace) -> str:
    if args.token:
        return args.token
    return get_crate_api_token()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=parse_log_level(parsed_args.log_level), force=True)
        token = _resolve_token(parsed_args)
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        if parsed_args.command == "import":
            machine = run_import(parsed_args.record_ids, token=token)
            if machine.state is JobState.ERROR:
                print(f"Error: {machine.error}", file=sys.stderr)
                sys.exit(1)
            if machine.state is JobState.COMPLETE:
                print("Import complete")
        elif parsed_args.command == "features":
            fetch_track_features(
                MatchedTrack(
                    record_id=parsed_args.record_id,
                    track_id=parsed_args.track_id,
                    spotify_track_id=parsed_args.spotify_id,
                ),
                token=token,
            )
            print("Audio features stored")
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    main()
