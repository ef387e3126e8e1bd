"""
Configuration and logging setup.

Settings come from an optional YAML file merged over :data:`DEFAULTS`.
"""

import logging
import os

import yaml

from .renderer import DEFAULT_TEMPLATE_DIR

DEFAULTS = {
    "dist_dir": os.path.join("ExcelDatabase", "Dist"),
    "data_dir": os.path.join("ExcelDatabase", "Resources"),
    "manifest_path": None,
    "template_dir": None,
    "log_level": "INFO",
}

MANIFEST_FILE = "ParseResult.json"


def load_config(config_path=None):
    """Load configuration from a YAML file, falling back to defaults."""
    config = dict(DEFAULTS)
    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        config.update(user_config)
    return config


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, str(level_str).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


class Settings:
    """Output locations derived from the configuration."""

    def __init__(self, dist_dir, data_dir, manifest_path=None, template_dir=None):
        self.dist_dir = dist_dir
        self.data_dir = data_dir
        self.manifest_path = manifest_path or os.path.join(dist_dir, MANIFEST_FILE)
        self.template_dir = template_dir or DEFAULT_TEMPLATE_DIR

    @classmethod
    def from_config(cls, config):
        return cls(
            dist_dir=config["dist_dir"],
            data_dir=config["data_dir"],
            manifest_path=config.get("manifest_path"),
            template_dir=config.get("template_dir"),
        )

    def script_path(self, kind, table_name):
        """Generated source for a table: ``<dist_dir>/<Kind>/<name>.py``."""
        return os.path.join(self.dist_dir, str(kind), f"{table_name}.py")

    def data_path(self, table_name):
        return os.path.join(self.data_dir, f"{table_name}.json")

    def __repr__(self):
        return (f"Settings(dist_dir={self.dist_dir!r}, data_dir={self.data_dir!r}, "
                f"manifest_path={self.manifest_path!r})")
