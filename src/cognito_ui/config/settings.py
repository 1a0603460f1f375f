"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from cognito_ui.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.locator.max_retries)
    3
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserSettings(BaseModel):
    """
    Browser launch settings.
    
    Attributes:
        headless: Run browser in headless mode
        browser_type: Playwright browser to launch
        navigation_timeout_ms: Timeout for page navigation
        viewport_width: Browser viewport width in pixels
        viewport_height: Browser viewport height in pixels
        user_agent: Custom user agent string
        slow_mo: Slow down operations by this amount (ms) - useful for debugging
    """
    headless: bool = True
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    navigation_timeout_ms: int = Field(default=30000, ge=1000, le=300000)
    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=720, ge=240, le=2160)
    user_agent: Optional[str] = None
    slow_mo: int = Field(default=0, ge=0, le=5000)
    ignore_https_errors: bool = False


class LocatorSettings(BaseModel):
    """
    Element resolution settings.
    
    Attributes:
        timeout_ms: Overall budget for one smart action's resolution
        max_retries: Number of resolution attempts the budget is split across
        retry_delay_ms: Fixed delay between resolution attempts
        poll_interval_ms: Delay between polls while waiting for a state
        state_check_timeout_ms: Cap on each per-poll state wait
        action_timeout_ms: Visibility/editability precondition wait before an action
        threshold: Minimum similarity the fuzzy full-document sweep accepts
        ignore_case: Compare text case-insensitively
        trim_whitespace: Trim and collapse whitespace before comparing
    """
    timeout_ms: int = Field(default=30000, ge=100, le=600000)
    max_retries: int = Field(default=3, ge=1, le=20)
    retry_delay_ms: int = Field(default=500, ge=0, le=10000)
    poll_interval_ms: int = Field(default=500, ge=10, le=10000)
    state_check_timeout_ms: int = Field(default=2000, ge=10, le=60000)
    action_timeout_ms: int = Field(default=5000, ge=100, le=60000)
    threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    ignore_case: bool = True
    trim_whitespace: bool = True


class LoggingSettings(BaseModel):
    """
    Logging configuration.
    
    Attributes:
        level: Log level
        file: Log file path (None for console only)
        json_format: Use JSON format for logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.
    
    Settings are loaded in this priority order (highest to lowest):
    1. Overrides applied with merge_with()
    2. Environment variables (prefixed with COGNITO__)
    3. Constructor values (the loader passes the YAML file here)
    4. Default values
    
    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(locator=LocatorSettings(max_retries=5))
    """
    
    model_config = SettingsConfigDict(
        env_prefix="COGNITO__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
    
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    locator: LocatorSettings = Field(default_factory=LocatorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment beats constructor values, which carry the YAML file
        return env_settings, init_settings, dotenv_settings, file_secret_settings
    
    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.
        
        Args:
            overrides: Dictionary of values to override
            
        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()
        
        def deep_merge(base: dict, updates: dict) -> dict:
            for key, value in updates.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value
            return base
        
        merged = deep_merge(current, overrides)
        # Built from validated sections without re-reading env, so overrides win
        return Settings.model_construct(
            browser=BrowserSettings.model_validate(merged.get("browser", {})),
            locator=LocatorSettings.model_validate(merged.get("locator", {})),
            logging=LoggingSettings.model_validate(merged.get("logging", {})),
        )
