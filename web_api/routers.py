from litestar import Controller, Response, delete, get, post, put
from litestar.background_tasks import BackgroundTask
from litestar.datastructures import State
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_200_OK
from loguru import logger

from rhythmkey.core.evaluation import Evaluator
from rhythmkey.core.keys import NOTES, MusicKey, key_grid, normalize_note
from rhythmkey.core.session import TempoReading
from rhythmkey.suites.standard import SUITE_DESCRIPTIONS, StandardSuites

from .models import (
    EvaluationRequest,
    EvaluationResult,
    KeyCell,
    KeyGridResponse,
    KeyInfo,
    NudgeRequest,
    SuiteInfo,
    TapRequest,
    TempoUpdate,
)


async def process_evaluation(
    suite_id: str, request: EvaluationRequest, results_store: dict
) -> None:
    """Process suite evaluation in background."""
    logger.info(f"Starting evaluation for {suite_id}")
    try:
        sequences = StandardSuites.get_suite(suite_id, n_taps=request.n_taps)
        results = []

        for sequence in sequences:
            try:
                trace, metrics = Evaluator.evaluate_sequence(sequence.sequence_def)
                results.append(
                    EvaluationResult(
                        sequence_name=sequence.name,
                        status="completed",
                        metrics={
                            "category": sequence.category,
                            "expected_bpm": sequence.sequence_def.metadata.bpm,
                            "tolerance_bpm": sequence.sequence_def.test_criteria.tempo_tolerance_bpm,
                            "evaluation": metrics.model_dump(),
                            # Raw trace for plotting
                            "trace": [p.model_dump() for p in trace],
                        },
                    )
                )
                logger.info(f"Evaluated {sequence.name}")

            except Exception as e:
                logger.error(f"Failed to evaluate {sequence.name}: {e}")
                results.append(
                    EvaluationResult(
                        sequence_name=sequence.name, status="failed", error=str(e)
                    )
                )

        results_store[suite_id] = results
        logger.info(f"Evaluation for {suite_id} completed")

    except Exception as e:
        logger.error(f"Evaluation failed: {e}")


class TempoController(Controller):
    """Live tap session owned by the application."""

    path = "/api"

    @get("/tempo")
    async def get_tempo(self, state: State) -> TempoReading:
        return state.session.reading()

    @put("/tempo")
    async def set_tempo(self, state: State, data: TempoUpdate) -> TempoReading:
        """Overwrite the tempo; values outside 30-300 BPM are clamped."""
        return state.session.set_bpm(data.bpm)

    @post("/tempo/nudge", status_code=HTTP_200_OK)
    async def nudge_tempo(self, state: State, data: NudgeRequest) -> TempoReading:
        return state.session.nudge(data.delta)

    @post("/tap")
    async def tap(self, state: State, data: TapRequest | None = None) -> TempoReading:
        """Register a tap at the given timestamp or at the server's monotonic clock."""
        return state.session.tap(data.timestamp if data else None)

    @delete("/session")
    async def restart_session(self, state: State) -> None:
        state.session.restart()


class KeyController(Controller):
    path = "/api/keys"

    @get("/")
    async def list_keys(self) -> list[KeyInfo]:
        return [
            KeyInfo(key=k.name, label=k.label, related_keys=k.related_keys)
            for k in MusicKey
        ]

    @get("/{note:str}")
    async def get_key_grid(self, note: str, minor: bool = False) -> KeyGridResponse:
        """Scale membership grid for a root note ("C", "F#", "F♯", ...)."""
        root = normalize_note(note)
        if root not in NOTES:
            raise NotFoundException(detail=f"Unknown note: {note}")

        return KeyGridResponse(
            note=root,
            minor=minor,
            grid=[
                KeyCell(note=c.note, is_selected=c.is_selected, is_related=c.is_related)
                for c in key_grid(root, minor=minor)
            ],
        )


class EvaluationController(Controller):
    path = "/api"

    @get("/suites")
    async def list_suites(self) -> list[SuiteInfo]:
        """List available evaluation suites."""
        return [
            SuiteInfo(id=suite_id, name=name, description=description)
            for suite_id, (name, description) in SUITE_DESCRIPTIONS.items()
        ]

    @post("/evaluate/{suite_id:str}")
    async def run_evaluation(
        self, state: State, suite_id: str, data: EvaluationRequest
    ) -> Response[dict[str, str]]:
        """Start evaluation for a specific suite."""
        if suite_id not in SUITE_DESCRIPTIONS:
            raise NotFoundException(detail="Suite not found")

        return Response(
            content={"status": "started", "suite_id": suite_id},
            background=BackgroundTask(process_evaluation, suite_id, data, state.results),
        )

    @get("/results/{suite_id:str}")
    async def get_results(self, state: State, suite_id: str) -> list[EvaluationResult]:
        """Get results for a suite."""
        return state.results.get(suite_id, [])

    @get("/results/{suite_id:str}/{sequence_name:str}/plot", media_type="image/png")
    async def get_result_plot(
        self, state: State, suite_id: str, sequence_name: str
    ) -> Response[bytes]:
        """Get the tempo trace plot for a specific result."""
        results = state.results.get(suite_id, [])
        result = next((r for r in results if r.sequence_name == sequence_name), None)

        if not result or not result.metrics:
            raise NotFoundException(detail="Evaluation result not found")

        from .plotting import generate_tempo_plot

        trace = result.metrics["trace"]
        plot_bytes = generate_tempo_plot(
            sequence_name=sequence_name,
            tap_times=[p["time"] for p in trace],
            bpms=[p["bpm"] for p in trace],
            confidences=[p["confidence"] for p in trace],
            expected_bpm=result.metrics["expected_bpm"],
            tolerance_bpm=result.metrics["tolerance_bpm"],
            accepted=[p["accepted"] for p in trace],
        )

        return Response(plot_bytes, media_type="image/png")
