#!/usr/bin/env python3
"""Curses front-end for the snm network manager."""
from __future__ import annotations

import argparse
import curses
import dataclasses
import locale
import sys

from config import Settings, configure_logging, load_settings
from constants import NETWORK_LIST_REGION, PROPERTIES_REGION
from coordinator import Outcome, ViewCoordinator, load_initial_state
from network_list import NetworkListView
from network_props import NetworkPropsForm
from shared_model import SharedModel
from snm_client import BackendUnreachable, SnmClient, open_connection
from surface import Anchor, Region, commit, init_palette, read_key, set_cursor_visible
from tui_base import AppError, ErrorSeverity, UIState, handle_error
from update_dispatcher import UpdateDispatcher

__version__ = "0.3.0"


def run_tui(
    stdscr: "curses._CursesWindow",
    settings: Settings,
    client: SnmClient,
    model: SharedModel,
    dispatcher: UpdateDispatcher,
) -> int:
    try:
        set_cursor_visible(False)
        init_palette()
        curses.set_escdelay(25)
        stdscr.timeout(settings.input_timeout_ms)
        stdscr.refresh()

        status_region = Region(1, 0, anchor=Anchor.BOTTOM)
        list_view = NetworkListView(Region(NETWORK_LIST_REGION.height, NETWORK_LIST_REGION.width))
        props_form = NetworkPropsForm(Region(PROPERTIES_REGION.height, PROPERTIES_REGION.width))
        coordinator = ViewCoordinator(
            client,
            model,
            list_view,
            props_form,
            status_region=status_region,
            ui_state=UIState(status_timeout=settings.status_timeout),
        )
        coordinator.show_list()

        while True:
            coordinator.render()
            place = coordinator.cursor()
            stdscr.noutrefresh()
            if place is None:
                set_cursor_visible(False)
            else:
                region, row, col = place
                set_cursor_visible(True)
                region.place_cursor(row, col)
            commit()

            key = read_key(stdscr)
            if key is None:
                continue
            if coordinator.handle_key(key) is Outcome.QUIT:
                return 0
    finally:
        # no notification may land while curses is being torn down
        dispatcher.stop()


def startup_failed(exc: Exception) -> None:
    """Report a startup error on stderr and exit with status 1."""
    print(f"snm-curses: {exc}", file=sys.stderr)
    handle_error(AppError(f"startup failed: {exc}", ErrorSeverity.FATAL, recoverable=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse and manage networks provided by the snm service.")
    parser.add_argument("--session-bus", action="store_true", help="Talk to snm on the session bus (testing).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    locale.setlocale(locale.LC_ALL, "")
    args = build_parser().parse_args(argv)

    settings = load_settings()
    if args.session_bus:
        settings = dataclasses.replace(settings, bus="session")
    configure_logging(settings)

    model = SharedModel()
    dispatcher = UpdateDispatcher(
        on_state=model.set_state,
        on_status=model.set_status,
        on_networks=model.set_networks,
        on_error=lambda exc: model.post_notice(f"Lost the notification channel: {exc}"),
        connect=lambda: open_connection(settings.bus),
    )

    try:
        client = SnmClient.connect_bus(settings.bus)
    except BackendUnreachable as exc:
        startup_failed(exc)

    try:
        try:
            dispatcher.start()
            client.hello()
            load_initial_state(client, model)
        except BackendUnreachable as exc:
            startup_failed(exc)
        try:
            return curses.wrapper(run_tui, settings, client, model, dispatcher)
        except KeyboardInterrupt:
            return 0
    finally:
        dispatcher.stop()
        client.close()


if __name__ == "__main__":
    sys.exit(main())
