"""
Configuration manager for loading and validating application configuration.
"""
import os
import json
from dataclasses import fields
from typing import Dict, Any, Optional

import yaml

from models.config import (
    AppConfig,
    CalibrationConfig,
    ContextConfig,
    GroupingConfig,
    LocaleConfig,
    LoggingConfig,
    OutputConfig,
)

_SECTIONS = {
    "grouping": GroupingConfig,
    "calibration": CalibrationConfig,
    "context": ContextConfig,
    "locale": LocaleConfig,
    "output": OutputConfig,
    "logging": LoggingConfig,
}


class ConfigManager:
    """Manages application configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default locations.
        """
        self.config_path = config_path or self._find_config_file()
        self._config: Optional[AppConfig] = None

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in standard locations."""
        possible_paths = [
            "config.yaml",
            "config.yml",
            "config.json",
            "settings.yaml",
            "settings.yml",
            "settings.json"
        ]

        for path in possible_paths:
            if os.path.exists(path):
                return path

        return None

    def load_config(self) -> AppConfig:
        """
        Load configuration from file or create default configuration.

        Returns:
            AppConfig: Loaded or default configuration

        Raises:
            ValueError: If configuration validation fails
            FileNotFoundError: If specified config file doesn't exist
        """
        if self._config is not None:
            return self._config

        if self.config_path:
            config_data = self._load_config_file(self.config_path)
            self._config = self._create_config_from_dict(config_data)
        else:
            self._config = AppConfig()

        self._config.validate()

        return self._config

    def _load_config_file(self, file_path: str) -> Dict[str, Any]:
        """
        Load configuration data from file.

        Raises:
            ValueError: If file format is not supported
            FileNotFoundError: If file doesn't exist
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        file_ext = os.path.splitext(file_path)[1].lower()

        with open(file_path, 'r', encoding='utf-8') as f:
            if file_ext in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif file_ext == '.json':
                return json.load(f)
            else:
                raise ValueError(f"Unsupported configuration file format: {file_ext}")

    def _create_config_from_dict(self, config_data: Dict[str, Any]) -> AppConfig:
        """
        从字典数据创建 AppConfig 实例。

        处理流程：
        1) app.strategy 映射为 AppConfig.strategy；
        2) grouping/calibration/context/locale/output/logging 各段按 dataclass 字段名注入，
           未知键被忽略，缺失键保持默认值；
        3) 列表字段若给出单个字符串，自动转换为列表。

        Args:
            config_data: 原始配置字典

        Returns:
            AppConfig: 归一化后的应用配置对象
        """
        app_cfg = AppConfig()
        app_settings = config_data.get('app') or {}
        if 'strategy' in app_settings:
            app_cfg.strategy = str(app_settings['strategy'])

        for section, cls in _SECTIONS.items():
            values = config_data.get(section)
            if not isinstance(values, dict):
                continue
            current = getattr(app_cfg, section)
            for f in fields(cls):
                if f.name not in values:
                    continue
                value = values[f.name]
                if isinstance(getattr(current, f.name), list) and isinstance(value, str):
                    value = [value]
                setattr(current, f.name, value)
        return app_cfg

    def save_config(self, config: AppConfig, file_path: Optional[str] = None) -> None:
        """
        Save configuration to file.

        Args:
            config: Configuration to save
            file_path: Path to save file. If None, uses current config_path
        """
        save_path = file_path or self.config_path or "config.yaml"

        os.makedirs(os.path.dirname(save_path) if os.path.dirname(save_path) else ".", exist_ok=True)

        config_dict = config.to_dict()

        file_ext = os.path.splitext(save_path)[1].lower()

        with open(save_path, 'w', encoding='utf-8') as f:
            if file_ext in ['.yaml', '.yml']:
                yaml.dump(config_dict, f, default_flow_style=False, allow_unicode=True)
            elif file_ext == '.json':
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
            else:
                raise ValueError(f"Unsupported configuration file format: {file_ext}")

    def get_config(self) -> AppConfig:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self) -> AppConfig:
        """Reload configuration from file."""
        self._config = None
        return self.load_config()

    def create_default_config_file(self, file_path: str = "config.yaml") -> None:
        """Create a default configuration file."""
        self.save_config(AppConfig(), file_path)
