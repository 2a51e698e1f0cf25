import logging
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path
    wcag_version: str = "22"
    log_level: str = "INFO"

    @property
    def criteria_path(self) -> Path:
        return self.data_dir / "criteria.json"

    @property
    def associations_path(self) -> Path:
        return self.data_dir / "associations.json"

    @property
    def techniques_path(self) -> Path:
        return self.data_dir / "techniques.json"


def load_config() -> AppConfig:
    return AppConfig(
        data_dir=Path(os.environ.get("TECHMAP_DATA_DIR", "data")),
        wcag_version=os.environ.get("WCAG_VERSION", "22"),
        log_level=os.environ.get("TECHMAP_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
