"""
Startup configuration for the pomodoro clock.

Defaults are overridden by ~/.pomodoroclock/config.json (or the file given
with --config), which is in turn overridden by command-line options. The
result is read once at launch and never changes afterwards.
"""

import argparse
import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from timer_logic import DEFAULT_TEMPLATE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / ".pomodoroclock" / "config.json"


class ConfigError(ValueError):
    """Malformed startup option or configuration file"""


@dataclass(frozen=True)
class AppConfig:
    work_seconds: int = 25 * 60
    break_seconds: int = 5 * 60
    sound_path: Optional[str] = None
    text_template: str = DEFAULT_TEMPLATE
    tick_ms: int = 500
    font_size: int = 48

    def validate(self):
        """Raise ConfigError on the first invalid value"""
        for name in ("work_seconds", "break_seconds"):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")
        for name in ("tick_ms", "font_size"):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if self.sound_path is not None and not isinstance(self.sound_path, str):
            raise ConfigError(f"sound_path must be a string, got {self.sound_path!r}")
        if not isinstance(self.text_template, str):
            raise ConfigError(f"text_template must be a string, got {self.text_template!r}")
        try:
            self.text_template.format(minutes=0, seconds=0)
        except (KeyError, IndexError, ValueError, AttributeError, TypeError) as e:
            raise ConfigError(f"invalid text_template {self.text_template!r}: {e}") from e
        return self


def _is_int(value):
    # bool is an int subclass; "true" is never a duration
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigManager:
    """Builds the immutable AppConfig from file and command line"""
    def __init__(self, config_file=None):
        self.explicit = config_file is not None
        self.config_file = Path(config_file) if config_file else DEFAULT_CONFIG_FILE

    def load_file(self):
        """Read the JSON file into a dict of AppConfig overrides"""
        if not self.config_file.exists():
            if self.explicit:
                raise ConfigError(f"config file not found: {self.config_file}")
            logger.debug("No config file at %s, using defaults", self.config_file)
            return {}

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except ValueError as e:
            raise ConfigError(f"{self.config_file}: invalid JSON ({e})") from e
        except OSError as e:
            raise ConfigError(f"{self.config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_file}: top level must be an object")

        allowed = {item.name for item in fields(AppConfig)}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ConfigError(f"{self.config_file}: unknown option(s): {', '.join(unknown)}")

        logger.debug("Loaded config file %s", self.config_file)
        return data

    def load(self, overrides=None):
        config = replace(AppConfig(), **self.load_file())
        if overrides:
            config = replace(config, **overrides)
        config.validate()
        logger.debug("Effective config: %s", config)
        return config


def build_parser():
    parser = argparse.ArgumentParser(
        prog="pomodoro-clock",
        description="Pomodoro countdown timer with an audible alert.",
    )
    parser.add_argument("--config", metavar="PATH",
                        help=f"JSON config file (default: {DEFAULT_CONFIG_FILE})")
    parser.add_argument("--work", dest="work_seconds", type=int, metavar="SECONDS",
                        help="work interval length (default: 1500)")
    parser.add_argument("--break", dest="break_seconds", type=int, metavar="SECONDS",
                        help="break interval length (default: 300)")
    parser.add_argument("--sound", dest="sound_path", metavar="PATH",
                        help="notification sound file (default: built-in chime)")
    parser.add_argument("--template", dest="text_template", metavar="FORMAT",
                        help="display format using {minutes} and {seconds} "
                             "(default: {minutes}:{seconds:02d})")
    parser.add_argument("--tick-ms", dest="tick_ms", type=int, metavar="MS",
                        help="polling interval in milliseconds (default: 500)")
    parser.add_argument("--font-size", dest="font_size", type=int, metavar="PT",
                        help="size of the time display (default: 48)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="debug logging")
    return parser


def parse_args(argv=None):
    """Parse the command line; returns (AppConfig, verbose).

    argparse itself exits with status 2 on unparseable options.
    """
    args = build_parser().parse_args(argv)
    overrides = {
        item.name: getattr(args, item.name)
        for item in fields(AppConfig)
        if getattr(args, item.name, None) is not None
    }
    config = ConfigManager(args.config).load(overrides)
    return config, args.verbose
