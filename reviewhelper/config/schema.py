from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

REQUIRED_LOCATORS = (
    "snooze_button",
    "submit_button",
    "window_close_button",
    "edit_button",
    "save_button",
    "original_tab",
    "edited_tab",
    "original_tab_content",
    "response",
    "metadata_section",
    "tab_container",
    "task_id",
    "operator_name",
    "prompt",
    "alignment_score",
    "qa_feedback_section",
)


class EnvironmentConfig(BaseModel):
    base_url: str
    browser: str = "chrome"
    headless: bool = False
    default_timeout_seconds: int = 10
    poll_interval_seconds: float = Field(default=0.25, gt=0)

    @field_validator("browser")
    @classmethod
    def validate_browser(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"chrome", "firefox"}:
            raise ValueError(f"Unsupported browser: {value}")
        return normalized


class WaitConfig(BaseModel):
    interval_seconds: float = Field(default=0.1, gt=0)
    timeout_seconds: float = Field(default=5.0, gt=0)


class SelectorDefinition(BaseModel):
    selector_type: str = "css"
    selector: str
    fallback_selectors: list[str] = Field(default_factory=list)
    text: str | None = None

    @field_validator("selector_type")
    @classmethod
    def validate_selector_type(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"css", "xpath"}:
            raise ValueError("selector_type must be 'css' or 'xpath'")
        return normalized


class HelperConfig(BaseModel):
    environment: EnvironmentConfig
    wait: WaitConfig = Field(default_factory=WaitConfig)
    selectors: dict[str, SelectorDefinition]
    artifacts_root: str = "artifacts"
    log_level: str = "INFO"

    @model_validator(mode="after")
    def validate_selectors(self) -> "HelperConfig":
        missing = [key for key in REQUIRED_LOCATORS if key not in self.selectors]
        if missing:
            raise ValueError(f"Missing selectors: {', '.join(missing)}")
        return self

    def get_selector(self, key: str) -> SelectorDefinition:
        try:
            return self.selectors[key]
        except KeyError:
            raise KeyError(f"Unknown locator key: {key}") from None
