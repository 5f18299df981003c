"""
Configuration Manager Module

Handles loading, saving, and managing application configuration.
Provides bi-directional mapping between the dataclasses and JSON persistence.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from domain.derivation import DerivationPolicy
from domain.entities import LabourStatus
from infrastructure.logger import get_logger

logger = get_logger("ConfigManager")


def _default_presence_weights() -> Dict[str, float]:
    return {
        "present": 1.0,
        "standby": 0.5,
        "leave": 0.0,
        "absent": 0.0,
    }


@dataclass
class PolicySettings:
    """Tunable constants of the payroll projection and risk rules."""
    presence_weights: Dict[str, float] = field(default_factory=_default_presence_weights)
    working_days_per_week: int = 6
    budget_exposure_ratio: float = 0.4
    short_crew_leave_threshold: int = 2
    deduction_review_threshold: int = 1
    redeploy_target: str = "BlueWave shaft prep"
    recent_attendance_limit: int = 6

    def to_policy(self) -> DerivationPolicy:
        """
        Build the domain policy object.

        Raises:
            ValueError: If a presence weight key is not a known status,
                or working_days_per_week is not positive
        """
        if self.working_days_per_week <= 0:
            raise ValueError(
                f"working_days_per_week must be positive, got {self.working_days_per_week}"
            )
        weights = {LabourStatus(key): float(value) for key, value in self.presence_weights.items()}
        return DerivationPolicy(
            presence_weights=weights,
            working_days_per_week=self.working_days_per_week,
            budget_exposure_ratio=self.budget_exposure_ratio,
            short_crew_leave_threshold=self.short_crew_leave_threshold,
            deduction_review_threshold=self.deduction_review_threshold,
            redeploy_target=self.redeploy_target,
            recent_attendance_limit=self.recent_attendance_limit,
        )


@dataclass
class DisplayPrefs:
    """Display preferences for printed and exported values."""
    currency_symbol: str = "₹"


@dataclass
class OutputSettings:
    """Output settings for exported reports."""
    output_dir: str = ""  # Default empty = project root
    excel_filename_pattern: str = "Site_Dashboard_{date}.xlsx"
    generate_pdf: bool = True
    pdf_filename_pattern: str = "Coordination_Brief_{date}.pdf"
    custom_font_path: str = ""  # Custom Unicode font for PDF generation


@dataclass
class AppConfig:
    """Main application configuration container."""
    policy: PolicySettings = field(default_factory=PolicySettings)
    display: DisplayPrefs = field(default_factory=DisplayPrefs)
    output_settings: OutputSettings = field(default_factory=OutputSettings)


class ConfigManager:
    """
    Manages application configuration with JSON persistence.

    Responsibilities:
    - Load configuration from JSON file
    - Save configuration to JSON file
    - Provide default configuration
    - Convert between dataclass and dict representations
    """

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._config: AppConfig = AppConfig()

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from JSON file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._config = self._dict_to_config(data)
            except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
                logger.warning(f"Failed to load config {self.config_path}, using defaults: {e}")
                self._config = AppConfig()
        else:
            self._config = AppConfig()
        return self._config

    def save(self) -> None:
        """Save current configuration to JSON file."""
        data = self._config_to_dict(self._config)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def update(self, **kwargs) -> None:
        """Update specific configuration sections."""
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
        self.save()

    def _config_to_dict(self, config: AppConfig) -> dict:
        """Convert AppConfig dataclass to dictionary."""
        return {
            "policy": {
                "presence_weights": dict(config.policy.presence_weights),
                "working_days_per_week": config.policy.working_days_per_week,
                "budget_exposure_ratio": config.policy.budget_exposure_ratio,
                "short_crew_leave_threshold": config.policy.short_crew_leave_threshold,
                "deduction_review_threshold": config.policy.deduction_review_threshold,
                "redeploy_target": config.policy.redeploy_target,
                "recent_attendance_limit": config.policy.recent_attendance_limit
            },
            "display": {
                "currency_symbol": config.display.currency_symbol
            },
            "output_settings": {
                "output_dir": config.output_settings.output_dir,
                "excel_filename_pattern": config.output_settings.excel_filename_pattern,
                "generate_pdf": config.output_settings.generate_pdf,
                "pdf_filename_pattern": config.output_settings.pdf_filename_pattern,
                "custom_font_path": config.output_settings.custom_font_path
            }
        }

    def _dict_to_config(self, data: dict) -> AppConfig:
        """Convert dictionary to AppConfig dataclass."""
        policy_data = data.get("policy", {})
        display_data = data.get("display", {})
        output_settings_data = data.get("output_settings", {})

        # Unknown status keys are rejected here rather than at derivation time
        weights = _default_presence_weights()
        for key, value in policy_data.get("presence_weights", {}).items():
            weights[LabourStatus(key).value] = float(value)

        policy = PolicySettings(
            presence_weights=weights,
            working_days_per_week=int(policy_data.get("working_days_per_week", 6)),
            budget_exposure_ratio=float(policy_data.get("budget_exposure_ratio", 0.4)),
            short_crew_leave_threshold=int(policy_data.get("short_crew_leave_threshold", 2)),
            deduction_review_threshold=int(policy_data.get("deduction_review_threshold", 1)),
            redeploy_target=policy_data.get("redeploy_target", "BlueWave shaft prep"),
            recent_attendance_limit=int(policy_data.get("recent_attendance_limit", 6))
        )
        # Surface invalid policy values here so load() falls back to defaults
        policy.to_policy()

        display = DisplayPrefs(
            currency_symbol=display_data.get("currency_symbol", "₹")
        )

        output_settings = OutputSettings(
            output_dir=output_settings_data.get("output_dir", ""),
            excel_filename_pattern=output_settings_data.get("excel_filename_pattern", "Site_Dashboard_{date}.xlsx"),
            generate_pdf=output_settings_data.get("generate_pdf", True),
            pdf_filename_pattern=output_settings_data.get("pdf_filename_pattern", "Coordination_Brief_{date}.pdf"),
            custom_font_path=output_settings_data.get("custom_font_path", "")
        )

        return AppConfig(
            policy=policy,
            display=display,
            output_settings=output_settings
        )
