"""
SplashContext

This module defines the SplashContext dataclass, which carries everything an operation needs:
the settings, the collection aliases and the quiet flag. It is stored on the click Context object
(ctx.obj) so subcommands receive it through @click.pass_obj, and tests build one around memory
backends.
"""

from dataclasses import dataclass, field

from splashy.aliases import AliasStore
from splashy.config import JsonSettingsBackend
from splashy.config import Settings
from splashy.config import SplashConfig
from splashy.config import load_config


@dataclass
class SplashContext:
    """
    Session state for one splashy invocation.
    """

    settings: Settings = field(default_factory=Settings)
    aliases: AliasStore = field(default_factory=AliasStore)
    config: SplashConfig = field(default_factory=SplashConfig)
    quiet: bool = False


def init() -> SplashContext:
    """initialize the splashy CLI app from the settings files on disk"""

    config = load_config()

    return SplashContext(
        settings=Settings(JsonSettingsBackend(config.settings_file)),
        aliases=AliasStore(JsonSettingsBackend(config.aliases_file)),
        config=config,
    )
