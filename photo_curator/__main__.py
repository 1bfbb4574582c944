"""
CLI entry point for photo curator.

Parses arguments, validates config, and wires components.
"""

import argparse
import fnmatch
import shutil
import sys
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path
from typing import TypedDict

from prettytable import PrettyTable

from .archive import ZipArchiveExtractor, ZipPhotoFetcher
from .exceptions import NoDirectoryError
from .interfaces import Judge
from .judges.console_judge import ConsoleJudge
from .judges.dummy_judge import DummyJudge
from .judges.sim_judge import SimulatedJudge
from .logging_config import get_logger, setup_logging
from .models import Photo
from .orchestrator import MAX_TARGET_SIZE, MIN_TARGET_SIZE, Orchestrator, RunConfig


class CLIArgs(TypedDict):
    """Typed representation of parsed CLI arguments."""
    archive: str
    target_size: int
    min_comparisons: int
    budget: int | None
    refine_rounds: int
    judge_type: str
    noise: float
    keep: list[str]
    lock: list[str]
    output_dir: str | None
    log_dir: str | None
    workers: int
    debug: bool
    log_level: str


def parse_args(argv: Sequence[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Photo Curator - Pairwise Preference Photo Selection"
    )

    _ = parser.add_argument(
        "archive",
        help="Path to a ZIP archive of photos"
    )

    _ = parser.add_argument(
        "--target-size",
        type=int,
        default=20,
        help=f"Number of photos to select, {MIN_TARGET_SIZE}-{MAX_TARGET_SIZE} (default: 20)"
    )
    _ = parser.add_argument(
        "--min-comparisons",
        type=int,
        default=3,
        help="Comparisons per photo before the ranking is stable (default: 3)"
    )
    _ = parser.add_argument(
        "--budget",
        type=int,
        help="Total judgments allowed (default: target_size * 25 if not specified)"
    )
    _ = parser.add_argument(
        "--refine-rounds",
        type=int,
        default=0,
        help="Extra refinement rounds after the ranking first stabilises (default: 0)"
    )
    _ = parser.add_argument(
        "--keep",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob on archive member names; only matching photos are ranked (repeatable)"
    )
    _ = parser.add_argument(
        "--lock",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob on archive member names; matching photos are pinned into the results once the ranking "
        "first stabilises and are skipped by refinement rounds (repeatable)"
    )
    _ = parser.add_argument(
        "--output-dir",
        help="Directory to write the selected photos to, in rank order"
    )
    _ = parser.add_argument(
        "--log-dir",
        help="Directory for the session log (default: --output-dir, else the current directory)"
    )
    _ = parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of threads used to decode the archive (default: 1)"
    )

    # Judge selection
    _ = parser.add_argument(
        "--judge-type",
        choices=["console", "simulated", "dummy"],
        default="console",
        help="Type of judge to use (default: console)"
    )
    _ = parser.add_argument(
        "--noise",
        type=float,
        default=0.1,
        help="Noise level for simulated judge (0-1, default: 0.1)"
    )
    _ = parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING)"
    )

    return parser.parse_args(argv)


def args_to_typed(ns: Namespace) -> CLIArgs:
    """Convert argparse Namespace to typed CLIArgs."""
    return CLIArgs(
        archive=ns.archive,
        target_size=ns.target_size,
        min_comparisons=ns.min_comparisons,
        budget=ns.budget,
        refine_rounds=ns.refine_rounds,
        judge_type=ns.judge_type,
        noise=ns.noise,
        keep=list(ns.keep),
        lock=list(ns.lock),
        output_dir=ns.output_dir,
        log_dir=ns.log_dir,
        workers=ns.workers,
        debug=ns.debug,
        log_level=ns.log_level,
    )


def validate_config(args: CLIArgs) -> None:
    """Validate configuration parameters."""
    logger = get_logger("validate_config")

    # Out-of-range selection sizes are clamped rather than rejected
    clamped = max(MIN_TARGET_SIZE, min(MAX_TARGET_SIZE, args["target_size"]))
    if clamped != args["target_size"]:
        logger.warning(f"target_size {args['target_size']} out of range, using {clamped}")
        print(f"Warning: target size clamped to {clamped}")
        args["target_size"] = clamped

    if args["min_comparisons"] < 1:
        logger.error(f"min_comparisons must be at least 1, got {args['min_comparisons']}")
        print(f"Error: min_comparisons must be at least 1, got {args['min_comparisons']}")
        sys.exit(1)

    if args["workers"] < 1:
        logger.error(f"workers must be at least 1, got {args['workers']}")
        print(f"Error: workers must be at least 1, got {args['workers']}")
        sys.exit(1)

    archive = Path(args["archive"])
    if not archive.is_file():
        logger.error(f"Archive does not exist: {archive}")
        print(f"Error: archive does not exist: {archive}")
        sys.exit(1)

    logger.info(f"Archive: {archive}")

    if args["output_dir"] is not None:
        output_dir = Path(args["output_dir"])
        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Output directory: {output_dir}")

    if args["budget"] is None:
        args["budget"] = args["target_size"] * 25
        logger.info(f"Computed budget: {args['budget']}")


def matching_ids(photos: Sequence[Photo], patterns: Sequence[str]) -> set[int]:
    """Ids of photos whose member name matches any of the glob patterns, case-insensitively."""
    return {
        photo.photo_id
        for photo in photos
        if any(fnmatch.fnmatch(photo.name.lower(), pattern.lower()) for pattern in patterns)
    }


def screened_ids(photos: Sequence[Photo], patterns: Sequence[str]) -> set[int] | None:
    """Ids of photos matching any keep pattern; None when no patterns are given."""
    if not patterns:
        return None
    return matching_ids(photos, patterns)


def wire_components(
    args: CLIArgs,
) -> tuple[ZipPhotoFetcher, Judge, RunConfig, set[int] | None, set[int]]:
    """Wire dependency injection components."""
    logger = get_logger("wire_components")

    logger.info("Creating photo fetcher")
    fetcher = ZipPhotoFetcher(Path(args["archive"]), extractor=ZipArchiveExtractor(max_workers=args["workers"]))
    photos = list(fetcher.list_photos())

    logger.info(f"Creating {args['judge_type']} judge")
    if args["judge_type"] == "console":
        judge: Judge = ConsoleJudge()
    elif args["judge_type"] == "simulated":
        # Without real preferences, later archive members are treated as better
        ground_truth = {photo.photo_id: float(i + 1) / len(photos) for i, photo in enumerate(photos)}
        judge = SimulatedJudge(ground_truth, noise=args["noise"])
        logger.info(f"Simulated judge created with {len(ground_truth)} photos, noise={args['noise']}")
    elif args["judge_type"] == "dummy":
        judge = DummyJudge(mode="deterministic")
    else:
        logger.error(f"Unknown judge type: {args['judge_type']}")
        raise ValueError(f"Unknown judge type: {args['judge_type']}")

    budget_value = args["budget"]
    assert budget_value is not None, "Budget must be set by validate_config"
    config = RunConfig(
        target_selection_size=args["target_size"],
        min_comparisons=args["min_comparisons"],
        budget=budget_value,
        refine_rounds=args["refine_rounds"],
    )
    logger.info(f"Configuration: target={config.target_selection_size}, budget={config.budget}")

    locked_ids = matching_ids(photos, args["lock"])
    if args["lock"] and not locked_ids:
        logger.warning(f"No photos match lock patterns {args['lock']}")

    return fetcher, judge, config, screened_ids(photos, args["keep"]), locked_ids


def write_selection(selection: Sequence[Photo], output_dir: Path) -> Path:
    """
    Write the selected photos into a ranked directory, best first.

    Args:
        selection: Selected photos in rank order
        output_dir: Output directory path

    Returns:
        The ranked directory
    """
    logger = get_logger("write_selection")

    ranked_dir = output_dir / "selected"
    if ranked_dir.exists():
        shutil.rmtree(ranked_dir)
        logger.info(f"Cleared existing selection directory: {ranked_dir}")
    ranked_dir.mkdir(parents=True)

    width = max(2, len(str(len(selection))))
    for rank, photo in enumerate(selection, 1):
        file_name = f"{rank:0{width}d}_{Path(photo.name).name or photo.photo_id}"
        (ranked_dir / file_name).write_bytes(photo.payload.data)
        logger.debug(f"Wrote {file_name}")

    logger.info(f"Wrote {len(selection)} photos to {ranked_dir}")
    return ranked_dir


def print_selection(selection: Sequence[Photo], locked_ids: frozenset[int]) -> None:
    """Print the final selection as a table."""
    table = PrettyTable()
    table.field_names = ["Rank", "Photo", "Name", "Score", "Comparisons", "Locked"]
    table.align["Rank"] = "r"
    table.align["Name"] = "l"
    table.align["Score"] = "r"
    table.align["Comparisons"] = "r"

    for rank, photo in enumerate(selection, 1):
        table.add_row([
            rank,
            photo.photo_id,
            photo.name,
            f"{photo.score:.1f}",
            photo.comparisons,
            "yes" if photo.photo_id in locked_ids else "",
        ])

    print(table)


def main(argv: Sequence[str] | None = None) -> None:
    """Main CLI entry point."""
    raw_args = parse_args(argv)
    args = args_to_typed(raw_args)

    log_dir = args["log_dir"] or args["output_dir"]
    setup_logging(level=args["log_level"], debug=args["debug"], log_dir=Path(log_dir) if log_dir else None)
    logger = get_logger("main")

    try:
        logger.info("Starting Photo Curator")
        validate_config(args)

        print("Photo Curator - Pairwise Preference Photo Selection")
        print("=" * 60)
        print(f"Archive: {args['archive']}")
        print(f"Target size: {args['target_size']}")
        print(f"Min comparisons: {args['min_comparisons']}")
        print(f"Budget: {args['budget']}")
        print(f"Judge type: {args['judge_type']}")
        if args["judge_type"] == "simulated":
            print(f"Noise level: {args['noise']}")
        print("=" * 60)

        fetcher, judge, config, kept_ids, locked_ids = wire_components(args)
        if fetcher.get_photo_count() == 0:
            print("No images found in archive. Please provide a ZIP containing image files.")
            sys.exit(1)

        orchestrator = Orchestrator(
            fetcher=fetcher, judge=judge, config=config, kept_ids=kept_ids, locked_ids=locked_ids
        )
        selection = orchestrator.run()

        print("\nSelected Photos:")
        assert orchestrator.session is not None
        print_selection(selection, orchestrator.session.pool.locked_ids)

        if args["output_dir"] is not None:
            ranked_dir = write_selection(selection, Path(args["output_dir"]))
            print(f"Wrote {len(selection)} photos to {ranked_dir}")

    except NoDirectoryError as e:
        logger.error(f"Not a ZIP archive: {e}")
        print(f"Error processing archive: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Curation interrupted by user")
        print("\nCuration interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
