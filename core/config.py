# core/config.py

"""Configuration management."""
import json
from pathlib import Path
from typing import Optional

class Config:
    """Application configuration manager."""

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = config_file or Path.home() / '.telegram_media_deserialize.json'
        self.default_config = {
            'read_buffer_size': 4096,
            'show_progress': True,
            'verbose': True,
            'report_format': 'text',
        }
        self.config = self.load_config()

    def load_config(self) -> dict:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    # Merge with defaults
                    config = self.default_config.copy()
                    config.update(loaded)
                    return config
            except (OSError, ValueError):
                pass
        return self.default_config.copy()

    def save_config(self):
        """Save configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self.config, f, indent=2, ensure_ascii=False)

    def get(self, key: str, default=None):
        """Get configuration value."""
        return self.config.get(key, default)

    def set(self, key: str, value):
        """Set configuration value."""
        self.config[key] = value
