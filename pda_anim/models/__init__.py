from .steps import SceneStep, batch_duration_ms
