from __future__ import annotations

import logging
from typing import List

from pda_core.errors import TraceError
from pda_core.stepper import ParseTraceStepper

from pda_anim.models.steps import SceneStep, batch_duration_ms

logger = logging.getLogger(__name__)


def compile_trace_to_steps(stepper: ParseTraceStepper, time_scale: float = 1.0) -> List[SceneStep]:
    """Drain ``stepper`` into scene steps, one per non-empty batch.

    Each step lasts as long as its slowest command (seconds, divided by
    ``time_scale``). A malformed trace ends the script at the last valid step.
    """
    steps: List[SceneStep] = []
    scale = max(1e-6, float(time_scale))

    while stepper.running:
        try:
            batch = stepper.step()
        except TraceError as exc:
            logger.error("trace stopped after %d steps: %s", len(steps), exc)
            break
        if not batch:
            continue
        duration = batch_duration_ms(batch) / 1000.0 / scale
        steps.append(SceneStep(idx=len(steps), duration=duration, commands=batch))

    return steps
