import os
from dataclasses import dataclass
from pathlib import Path

DATE_FORMATS = ("dd/mm/yyyy", "yyyy-mm-dd")
DEFAULT_CURRENCY = "€"
DEFAULT_LANGUAGE = "en"
DEFAULT_DATE_FORMAT = "dd/mm/yyyy"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    font_path: Path | None = None
    bold_font_path: Path | None = None
    log_level: str = "INFO"


@dataclass(frozen=True)
class ReportConfig:
    currency: str = DEFAULT_CURRENCY
    date_format: str = DEFAULT_DATE_FORMAT
    language: str = DEFAULT_LANGUAGE

    def __post_init__(self) -> None:
        if self.date_format not in DATE_FORMATS:
            raise ValueError(f"unsupported date format: {self.date_format}")


def _optional_path(name: str) -> Path | None:
    value = os.environ.get(name, "").strip()
    return Path(value) if value else None


def get_settings() -> Settings:
    data_dir = _optional_path("CASHBOOK_DATA_DIR") or Path.cwd() / ".data"
    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "cashbook.sqlite",
        font_path=_optional_path("CASHBOOK_FONT_PATH"),
        bold_font_path=_optional_path("CASHBOOK_BOLD_FONT_PATH"),
        log_level=os.environ.get("CASHBOOK_LOG_LEVEL", "INFO").strip().upper(),
    )
