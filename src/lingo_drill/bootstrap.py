"""Shared setup for the lingo-drill command modules."""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional

from .config import AppConfig, load_config
from .core.config import ConfigError
from .core.logging import configure_logger
from .core.workspace import WorkspaceError, WorkspaceLayout, ensure_workspace
from .speech import Pyttsx3Synthesizer, SpeechClient

__all__ = [
    "Runtime",
    "add_common_arguments",
    "build_speech_client",
    "blocking_speaker",
    "load_runtime",
]


@dataclass(frozen=True)
class Runtime:
    layout: WorkspaceLayout
    config: AppConfig
    logger: logging.Logger
    log_path: Path


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to lingo.toml (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root (defaults to LINGO_DRILL_DATA_HOME).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log output to stderr.",
    )


def load_runtime(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    env: Mapping[str, str] | None = None,
) -> Runtime:
    """Resolve workspace, config, and logger; usage errors exit via ``parser``."""
    try:
        layout = ensure_workspace(env=env, path=getattr(args, "workspace", None))
        config = load_config(
            layout, explicit_path=getattr(args, "config", None), env=env
        )
    except (ConfigError, WorkspaceError) as exc:
        parser.error(str(exc))
    # Parent of every module logger in the package.
    logger, log_path = configure_logger(
        "lingo_drill",
        filename="lingo.log",
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=config.logging.verbose or bool(getattr(args, "verbose", False)),
    )
    return Runtime(layout=layout, config=config, logger=logger, log_path=log_path)


def build_speech_client(
    runtime: Runtime, *, api_key: Optional[str] = None
) -> SpeechClient:
    speech_config = runtime.config.speech
    if api_key:
        speech_config = speech_config.with_api_key(api_key)
    fallback = runtime.config.fallback_voice
    return SpeechClient(
        speech_config,
        fallback=Pyttsx3Synthesizer(rate=fallback.rate, voice=fallback.voice),
        logger=runtime.logger.getChild("speech"),
    )


def blocking_speaker(client: SpeechClient) -> Callable[[str], None]:
    """Adapt ``client.speak`` for the synchronous terminal runners."""

    def _speak(text: str) -> None:
        asyncio.run(client.speak(text))

    return _speak
