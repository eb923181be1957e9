#!/usr/bin/env python3

import asyncio
import datetime
import json
import os
import pathlib
import sys
from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory, ThreadedHistory
from prompt_toolkit.patch_stdout import patch_stdout

from flagmap import App, FlagmapError, config, data, options, store
from flagmap.helpers import truthy

# just load our dot files into the environment too
load_dotenv(".env.flagmap")

CONFIG_DEFAULT = dict(
    FLAGMAP_STORE="flagmap",
    FLAGMAP_LOGDIR="runlogs",
    FLAGMAP_PLUGINS="",
    FLAGMAP_STRICT="",
    FLAGMAP_FAIL_FAST="",
)

# populate config with defaults if they aren't in the environment
CONFIG = {**CONFIG_DEFAULT, **os.environ}


def setup_logging(logdir: str | os.PathLike) -> None:
    """Console logging to stderr plus full TRACE logs on disk."""
    now = datetime.datetime.now()
    LOGDIR = pathlib.Path(logdir) / f"{now.year}" / f"{now.month:02}"
    LOGDIR.mkdir(exist_ok=True, parents=True)
    LOG_FILE_TEMPLATE = str(LOGDIR / f"flagmap-{now:%Y%m%dT%H%M%S}")

    logger.remove()
    logger.add(sys.stderr, level="INFO", colorize=True)

    # user input is logged at TRACE so it lands in the files but not the console
    logger.add(sink=LOG_FILE_TEMPLATE + ".log", level="TRACE", colorize=False)

    logger.info("Logging session with prefix: {}", LOG_FILE_TEMPLATE)


def parse_inputs(args: list[str]) -> dict[str, Any]:
    """Merge each JSON object argument, in order, into one input object."""
    merged: dict[str, Any] = {}
    for arg in args:
        got = json.loads(arg)
        if not isinstance(got, Mapping):
            raise ValueError(f"expected a JSON object, got: {arg}")

        merged |= got

    return merged


def build_app() -> App:
    app = App()
    app.use(options())
    app.use(data())
    app.use(store(CONFIG["FLAGMAP_STORE"]))
    app.use(
        config(
            strict=truthy(CONFIG["FLAGMAP_STRICT"]),
            fail_fast=truthy(CONFIG["FLAGMAP_FAIL_FAST"]),
        )
    )

    # report everything the dispatch touches
    for event in ("set", "get", "has", "del", "option", "data", "use"):
        app.on(event, lambda *args, event=event: logger.info("[{}] {}", event, args))

    for event in ("set", "get", "has", "del"):
        app.store.on(
            event, lambda *args, event=event: logger.info("[store.{}] {}", event, args)
        )

    return app


async def runargs(app: App, argv: Mapping[str, Any]) -> bool:
    """Dispatch one input object; True on success."""
    logger.trace("> {}", argv)
    try:
        await app.config.process(argv)
    except FlagmapError as e:
        logger.error("[{}] {}", e.key, e)
        if e.__cause__ is not None:
            logger.opt(exception=e.__cause__).debug("Cause:")

        return False

    return True


async def dorepl(app: App) -> None:
    session: PromptSession = PromptSession(
        history=ThreadedHistory(
            FileHistory(os.path.expanduser("~/.flagmap_history"))
        ),
        auto_suggest=AutoSuggestFromHistory(),
    )

    # The Input Processing REPL
    while True:
        try:
            text1 = await session.prompt_async("flagmap> ", enable_history_search=True)
            if not text1.strip():
                continue

            await runargs(app, parse_inputs([text1]))
        except KeyboardInterrupt:
            # Control-C pressed. Try again.
            continue
        except EOFError:
            # Control-D pressed
            logger.info("Exiting...")
            break
        except ValueError as e:
            # also catches json.JSONDecodeError
            logger.error("Error parsing your input: {}", e)


async def initcli(args: list[str]) -> int:
    setup_logging(CONFIG["FLAGMAP_LOGDIR"])
    app = build_app()

    try:
        if plugins := CONFIG["FLAGMAP_PLUGINS"]:
            if not await runargs(app, {"use": plugins}):
                return 1

        if args:
            try:
                argv = parse_inputs(args)
            except ValueError as e:
                logger.error("Error parsing arguments: {}", e)
                return 2

            return 0 if await runargs(app, argv) else 1

        if sys.stdin.isatty():
            # patch entire application with prompt-toolkit-compatible stdout
            with patch_stdout(raw=True):
                await dorepl(app)
        else:
            logger.error("No input given and attached input isn't a console!")
            return 2

        return 0
    finally:
        app.store.close()


def runit():
    """Entry point for flagmap script and __main__ for entire package."""
    try:
        sys.exit(asyncio.run(initcli(sys.argv[1:])))
    except KeyboardInterrupt:
        # known-good exit condition
        ...


if __name__ == "__main__":
    runit()
