"""FastAPI app entrypoint for the frame stopwatch."""

from fastapi import FastAPI

from frame_stopwatch.api.routes import router, set_stopwatch
from frame_stopwatch.clock import ClockEngine
from frame_stopwatch.config import StopwatchConfig
from frame_stopwatch.frames import FrameScheduler, ThreadedFrameScheduler
from frame_stopwatch.telemetry import CommandLog


def create_app(
    config: StopwatchConfig | None = None,
    scheduler: FrameScheduler | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Without an explicit scheduler, frames come from a background thread at
    ``config.frames.fps``.
    """
    config = config or StopwatchConfig.from_env()
    if scheduler is None:
        scheduler = ThreadedFrameScheduler(fps=config.frames.fps)
    app = FastAPI(title="Frame Stopwatch", description="Frame-synchronised stopwatch with alarms")
    engine = ClockEngine(scheduler, config)
    set_stopwatch(engine, CommandLog(maxlen=config.api.audit_maxlen))
    app.state.engine = engine
    app.include_router(router, tags=["stopwatch"])
    return app


app = create_app()
