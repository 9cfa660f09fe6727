from pathlib import Path

from pydantic_settings import BaseSettings

CLASSIFIER_METRICS_ENV_PREFIX = "CLASSIFIER_METRICS_"


class ReportSettings(BaseSettings):
    model_config = {"env_prefix": CLASSIFIER_METRICS_ENV_PREFIX}

    actual_column: str = "actual"
    predicted_column: str = "predicted"
    split_column: str = "split"
    plot_dpi: int = 150
    output_dir: Path = Path("reports") / "metrics"
