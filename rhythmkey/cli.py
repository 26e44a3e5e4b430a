#!/usr/bin/env python3
"""RhythmKey - CLI Entry Point.

Command-line interface for the tap tempo estimator. Runs evaluation
suites, replays recorded taps, and starts the tap TUI or the web API.
"""

import argparse
import json
import sys
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from rhythmkey import __version__
from rhythmkey.core.evaluation import Evaluator, TempoMetrics, TracePoint
from rhythmkey.core.session import TapSession
from rhythmkey.presets import PRESETS, SessionConfig, get_preset, load_user_presets
from rhythmkey.suites.standard import SUITE_DESCRIPTIONS, StandardSuites, TapSequence

# --- Pydantic Models for CLI Output ---


class TestInputConfig(BaseModel):
    """Configuration used to run the evaluation suite."""

    suite: str = Field(description="Evaluation suite name")
    n_taps: int = Field(description="Taps per sequence")


class SequenceResult(BaseModel):
    """Evaluation result for a single tap sequence."""

    sequence_name: str
    category: str
    status: str
    expected_bpm: float | None = None
    trace: list[TracePoint] = Field(default_factory=list)
    evaluation: TempoMetrics | None = None
    error: str | None = None
    plot_path: str | None = None


class AnalysisResultsOutput(BaseModel):
    """Complete evaluation results."""

    suite: str
    total_sequences: int
    completed: int
    failed: int
    passed: int
    sequences: list[SequenceResult]


def setup_logging(verbose: bool = False):
    """Configure logging."""
    logger.remove()

    log_file = Path.cwd() / "logs" / "rhythmkey.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        rotation="10 MB",
        retention="7 days",
        level="DEBUG" if verbose else "INFO",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}",
    )

    if verbose:
        logger.add(sys.stderr, level="DEBUG")


def run_analysis(suite_id: str, n_taps: int, output_dir: Path) -> int:
    """Run an evaluation suite and write its artifacts."""
    logger.info(f"Running suite '{suite_id}' with n_taps={n_taps}")

    output_dir.mkdir(parents=True, exist_ok=True)
    plots_dir = output_dir / "plots"
    plots_dir.mkdir(exist_ok=True)

    sequences = StandardSuites.get_suite(suite_id, n_taps=n_taps)
    logger.info(f"Loaded {len(sequences)} tap sequences")

    test_input = TestInputConfig(suite=suite_id, n_taps=n_taps)
    (output_dir / "test_input.json").write_text(test_input.model_dump_json(indent=2))

    ground_truth_data = {}
    results: list[SequenceResult] = []

    for sequence in sequences:
        logger.info(f"Evaluating: {sequence.name}")

        ground_truth_data[sequence.name] = {
            "category": sequence.category,
            "sequence_definition": sequence.sequence_def.model_dump(),
        }

        results.append(analyze_sequence(sequence, plots_dir))

    (output_dir / "ground_truth.json").write_text(
        json.dumps(ground_truth_data, indent=2, default=str)
    )

    completed = sum(1 for r in results if r.status == "completed")
    failed = len(results) - completed
    passed = sum(1 for r in results if r.evaluation and r.evaluation.passed)

    analysis_output = AnalysisResultsOutput(
        suite=suite_id,
        total_sequences=len(results),
        completed=completed,
        failed=failed,
        passed=passed,
        sequences=results,
    )
    (output_dir / "analysis_results.json").write_text(
        analysis_output.model_dump_json(indent=2)
    )

    evaluation_summary = {
        "suite": suite_id,
        "summary": {
            "total": len(results),
            "completed": completed,
            "failed": failed,
            "passed": passed,
            "pass_rate": passed / len(results) if results else 0,
        },
        "per_sequence": {
            r.sequence_name: r.evaluation.model_dump() if r.evaluation else None
            for r in results
        },
    }
    (output_dir / "evaluation.json").write_text(
        json.dumps(evaluation_summary, indent=2, default=str)
    )

    logger.info(f"Results saved to {output_dir}")
    logger.info(f"Passed: {passed}/{len(results)}, failed to run: {failed}")

    return 0 if failed == 0 else 1


def analyze_sequence(sequence: TapSequence, plots_dir: Path) -> SequenceResult:
    """Replay a single sequence and return its results."""
    try:
        seq_def = sequence.sequence_def
        trace, metrics = Evaluator.evaluate_sequence(seq_def)

        result = SequenceResult(
            sequence_name=sequence.name,
            category=sequence.category,
            status="completed",
            expected_bpm=seq_def.metadata.bpm,
            trace=trace,
            evaluation=metrics,
        )

        from web_api.plotting import generate_tempo_plot

        plot_bytes = generate_tempo_plot(
            sequence_name=sequence.name,
            tap_times=[p.time for p in trace],
            bpms=[p.bpm for p in trace],
            confidences=[p.confidence for p in trace],
            expected_bpm=seq_def.metadata.bpm,
            tolerance_bpm=seq_def.test_criteria.tempo_tolerance_bpm,
            accepted=[p.accepted for p in trace],
        )

        plot_path = plots_dir / f"{sequence.name}.png"
        plot_path.write_bytes(plot_bytes)
        result.plot_path = str(plot_path)

        return result

    except Exception as e:
        logger.error(f"Failed to evaluate {sequence.name}: {e}")
        return SequenceResult(
            sequence_name=sequence.name,
            category=sequence.category,
            status="failed",
            error=str(e),
        )


def _load_timestamps(values: list[float]) -> list[float]:
    if not values:
        try:
            values = [float(line.strip()) for line in sys.stdin if line.strip()]
        except ValueError as e:
            raise SystemExit(f"Timestamps must be numbers in seconds: {e}")
    if len(values) < 2:
        raise SystemExit("Need at least two taps to estimate tempo.")
    return values


def _session_config(preset: str) -> SessionConfig:
    try:
        return get_preset(preset)
    except KeyError as e:
        raise SystemExit(e.args[0])


def replay_taps(timestamps: list[float], preset: str = "default", as_json: bool = False) -> int:
    """Feed recorded tap timestamps through a session and print the result."""
    session = TapSession(config=_session_config(preset))
    accepted = 0

    for t in timestamps:
        if session.tap(t).accepted:
            accepted += 1

    reading = session.reading()
    rejected = len(timestamps) - 1 - accepted
    logger.info(f"Replayed {len(timestamps)} taps: {reading.bpm:.2f} BPM")

    if as_json:
        print(reading.model_dump_json(indent=2))
        return 0

    print("TAP TEMPO REPORT")
    print("================")
    print(f"Taps             : {len(timestamps)} ({accepted} accepted, {rejected} rejected)")
    print(f"Estimated BPM    : {reading.bpm:.2f}")
    print(f"Half / double    : {reading.half_time_bpm:.2f} / {reading.double_time_bpm:.2f}")
    print(f"Confidence       : {reading.confidence:.2f}")
    print(f"Metronome period : {reading.metronome_period_s:.4f} s")
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="RhythmKey - Tap tempo estimation",
        epilog="Use 'run' to evaluate the estimator, 'tap' to tap along.",
    )

    parser.add_argument("--version", action="version", version=f"rhythmkey {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--presets-file",
        type=Path,
        default=None,
        help="JSON file with additional session presets",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run evaluation suite")
    run_parser.add_argument(
        "--suite",
        "-s",
        choices=list(SUITE_DESCRIPTIONS),
        default="all",
        help="Evaluation suite to run (default: all)",
    )
    run_parser.add_argument(
        "--taps",
        "-n",
        type=int,
        default=16,
        help="Taps per sequence (default: 16)",
    )
    run_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("./results"),
        help="Output directory for artifacts (default: ./results)",
    )

    # Replay command
    replay_parser = subparsers.add_parser(
        "replay", help="Estimate tempo from recorded tap timestamps"
    )
    replay_parser.add_argument(
        "timestamps",
        nargs="*",
        type=float,
        help="Tap timestamps in seconds. Leave empty to read from STDIN.",
    )
    replay_parser.add_argument("--preset", default="default", help="Session preset")
    replay_parser.add_argument("--json", action="store_true", help="Print JSON output")

    # Tap command
    tap_parser = subparsers.add_parser("tap", help="Start the tap tempo TUI")
    tap_parser.add_argument(
        "--preset",
        default="default",
        help=f"Session preset (built-in: {', '.join(PRESETS)})",
    )

    # Web command
    web_parser = subparsers.add_parser("web", help="Start web API server")
    web_parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=8000,
        help="Server port (default: 8000)",
    )
    web_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Server host (default: 127.0.0.1)",
    )

    args = parser.parse_args()
    setup_logging(verbose=getattr(args, "verbose", False))

    if args.presets_file is not None:
        count = load_user_presets(args.presets_file)
        logger.info(f"Loaded {count} presets from {args.presets_file}")

    if args.command == "run":
        return run_analysis(args.suite, args.taps, args.output)
    elif args.command == "replay":
        return replay_taps(_load_timestamps(args.timestamps), args.preset, args.json)
    elif args.command == "tap":
        from rhythmkey.ui.app import RhythmKeyApp

        RhythmKeyApp(config=_session_config(args.preset)).run()
        return 0
    elif args.command == "web":
        import uvicorn

        uvicorn.run("web_api.main:app", host=args.host, port=args.port)
        return 0
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
