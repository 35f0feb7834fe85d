"""Engine settings using pydantic-settings.

All values can be overridden through ``CALLWATCH_*`` environment variables or
a ``.env`` file. List-valued settings take JSON in the environment, e.g.
``CALLWATCH_CONFIRM_BUTTON_TEXTS='["확인", "OK"]'``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..model.control_state import ControlState

_APP_ID = "com.kakao.taxi.driver:id"


class EngineSettings(BaseSettings):
    """Main configuration settings for the acceptance engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CALLWATCH_",
        case_sensitive=False,
        extra="ignore",
    )

    # Target application
    target_package: str = Field(
        "com.kakao.taxi.driver", description="Package a snapshot must belong to"
    )

    # Screen markers
    list_screen_marker: str = Field("예약콜 리스트", description="Text shown on the call list")
    detail_screen_markers: list[str] = Field(
        default_factory=lambda: ["예약콜 상세", "출발지", "도착지"],
        description="Any of these texts means the detail screen rendered",
    )
    already_assigned_marker: str = Field(
        "이미 배차", description="Dialog text when another driver took the call"
    )
    canceled_marker: str = Field("콜이 취소", description="Dialog text when the call was canceled")

    # View identifiers
    refresh_button_id: str = Field(f"{_APP_ID}/action_refresh", description="Refresh control")
    accept_button_id: str = Field(f"{_APP_ID}/btn_call_accept", description="Accept control")
    confirm_button_id: str = Field(f"{_APP_ID}/btn_positive", description="Confirm control")
    map_view_id: str = Field(f"{_APP_ID}/map_view", description="Map shown on the detail screen")
    close_button_id: str = Field(f"{_APP_ID}/action_close", description="Detail screen close")
    dialog_dismiss_id: str = Field("android:id/button1", description="Positive dialog button")
    privileged_tap_identifiers: list[str] = Field(
        default_factory=lambda: [f"{_APP_ID}/btn_call_accept"],
        description="Controls that ignore ordinary synthetic taps",
    )

    # Fallback labels
    accept_button_texts: list[str] = Field(
        default_factory=lambda: ["수락", "직접결제 수락", "자동결제 수락", "콜 수락"],
        description="Labels tried when the accept control has no identifier match",
    )
    confirm_button_texts: list[str] = Field(
        default_factory=lambda: ["수락하기", "확인", "수락", "OK", "예", "Yes"],
        description="Labels tried when the confirm control has no identifier match",
    )
    dismiss_button_texts: list[str] = Field(
        default_factory=lambda: ["확인", "닫기", "OK"], description="Dialog dismiss labels"
    )
    list_container_classes: list[str] = Field(
        default_factory=lambda: [
            "androidx.recyclerview.widget.RecyclerView",
            "android.support.v7.widget.RecyclerView",
            "android.widget.ListView",
        ],
        description="Widget classes that hold the call list items",
    )

    # Tick delays (ms)
    idle_delay_ms: int = Field(500, description="Delay between ticks while idle")
    waiting_delay_ms: int = Field(10, description="awaiting-opportunity tick delay")
    list_detected_delay_ms: int = Field(10, description="list-screen-detected tick delay")
    refreshing_delay_ms: int = Field(30, description="refreshing tick delay")
    analyzing_delay_ms: int = Field(50, description="analyzing tick delay")
    targeting_delay_ms: int = Field(10, description="targeting-item tick delay")
    detail_delay_ms: int = Field(50, description="detail-screen-detected tick delay")
    confirm_delay_ms: int = Field(10, description="awaiting-confirmation tick delay")
    accepted_delay_ms: int = Field(500, description="accepted tick delay")
    recovery_delay_ms: int = Field(100, description="timeout-recovery tick delay")
    error_delay_ms: int = Field(500, description="Tick delay in error states")

    # Loop delays (ms)
    no_snapshot_delay_ms: int = Field(100, description="Retry delay when no live snapshot exists")
    paused_delay_ms: int = Field(500, description="Tick delay while paused")
    invalidated_snapshot_delay_ms: int = Field(200, description="Retry after a stale snapshot")
    privileged_denied_delay_ms: int = Field(3000, description="Backoff after a denied privileged tap")
    fault_delay_ms: int = Field(1000, description="Backoff after an unexpected handler fault")

    # Timeouts (ms)
    state_timeout_ms: int = Field(3000, gt=0, description="Default time allowed in one state")
    confirm_timeout_ms: int = Field(
        7000, gt=0, description="Time allowed in awaiting-confirmation"
    )

    # Handler limits
    max_targeting_retries: int = Field(3, ge=0, description="In-state retries for item clicks")
    max_confirm_clicks: int = Field(3, ge=0, description="In-state retries for the confirm click")
    confirm_stable_ticks: int = Field(
        2, ge=1, description="Ticks the confirm control must stay put before clicking"
    )
    confirm_wait_ticks: int = Field(
        100, ge=1, description="Ticks to watch for rejection dialogs after confirming"
    )
    empty_list_retry_ms: int = Field(200, description="How long analyzing waits for list items")
    refresh_log_interval_ms: int = Field(5000, description="Minimum gap between refresh logs")

    # Policy
    pause_on_fail: bool = Field(False, description="Pause after a call is lost to someone else")

    # Storage and logging
    parsing_config_path: Path | None = Field(None, description="JSON file with parsing rules")
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_path: Path = Field(Path("./logs"), description="Path for log files")

    def tick_delay_ms(self, state: ControlState) -> int:
        """Delay before the next tick when the engine sits in ``state``."""
        if state.is_error:
            return self.error_delay_ms
        return {
            ControlState.IDLE: self.idle_delay_ms,
            ControlState.AWAITING_OPPORTUNITY: self.waiting_delay_ms,
            ControlState.LIST_SCREEN_DETECTED: self.list_detected_delay_ms,
            ControlState.REFRESHING: self.refreshing_delay_ms,
            ControlState.ANALYZING: self.analyzing_delay_ms,
            ControlState.TARGETING_ITEM: self.targeting_delay_ms,
            ControlState.DETAIL_SCREEN_DETECTED: self.detail_delay_ms,
            ControlState.AWAITING_CONFIRMATION: self.confirm_delay_ms,
            ControlState.ACCEPTED: self.accepted_delay_ms,
            ControlState.TIMEOUT_RECOVERY: self.recovery_delay_ms,
        }[state]

    def timeout_ms(self, state: ControlState) -> int:
        if state is ControlState.AWAITING_CONFIRMATION:
            return self.confirm_timeout_ms
        return self.state_timeout_ms


# Singleton instance
_settings: EngineSettings | None = None


def get_settings() -> EngineSettings:
    """Get the singleton settings instance.

    Returns:
        EngineSettings instance
    """
    global _settings

    if _settings is None:
        _settings = EngineSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
