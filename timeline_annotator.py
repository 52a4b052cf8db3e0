import sys
import os
import json
import math
import logging
import argparse
import traceback
from PyQt5.QtCore import QCoreApplication
import constants
from system import setup_system, ConfigManager
from state_codec import encode, query_from_url
from timeline_model import Event, Mode, TimelineState
from timeline_math import format_time, format_number, parse_int
from state_store import TimelineStore
from editor_ops import event_listing
from playback_clock import QtTickScheduler
from timeline_view import Axis, TimelineViewModel, view_for_mode

logger = logging.getLogger(constants.LOGGER_NAME)


def exception_hook(exctype, value, tb):
    err_msg = "".join(traceback.format_exception(exctype, value, tb))
    logger.critical(f"CORE CRASH DETECTED:\n{err_msg}")
    sys.__excepthook__(exctype, value, tb)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="timeline-annotator",
        description="Annotate a timeline with timestamped events and replay it.",
    )
    parser.add_argument("--home", default=constants.DEFAULT_HOME_DIR,
                        help="Directory for config and logs")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print the timeline held in a query string")
    show.add_argument("query", nargs="?", help="Query string or full URL (defaults to the last session)")
    show.add_argument("--json", action="store_true", help="Print the decoded state as JSON")

    enc = sub.add_parser("encode", help="Build a shareable query string")
    enc.add_argument("--duration", required=True, help="Total duration in seconds")
    enc.add_argument("--mode", default=Mode.editor.value, choices=[m.value for m in Mode])
    enc.add_argument("--event", action="append", default=[], metavar="TS:TEXT",
                     help="Event at TS seconds (repeatable)")

    play = sub.add_parser("play", help="Replay the events in real time")
    play.add_argument("query", nargs="?", help="Query string or full URL (defaults to the last session)")
    play.add_argument("--vertical", action="store_true", help="Report offsets on the vertical timeline")
    return parser


def resolve_query(query, config):
    if query is None:
        query = config.get('last_query', '')
        logger.info("[SESSION] Restoring last session query.")
    else:
        query = query_from_url(query)
    config.set('last_query', query)
    return query


def parse_event_arg(value):
    timestamp, _, text = value.partition(constants.EVENT_SEPARATOR)
    return Event(timestamp=timestamp.strip(), text=text)


def run_show(args, config, out=None):
    out = out or sys.stdout
    state = TimelineStore(resolve_query(args.query, config)).read_state()
    if args.json:
        print(json.dumps(state.to_dict(), indent=2), file=out)
        return 0
    print(f"mode: {state.mode.value}", file=out)
    print(f"duration: {format_time(state.duration)}", file=out)
    for line in event_listing(state):
        print(line, file=out)
    return 0


def run_encode(args, out=None):
    out = out or sys.stdout
    state = TimelineState(
        duration=args.duration,
        events=[parse_event_arg(v) for v in args.event],
        mode=Mode.parse(args.mode),
    )
    print(encode(state), file=out)
    return 0


def run_play(args, config, out=None, app=None):
    out = out or sys.stdout
    store = TimelineStore(resolve_query(args.query, config))
    state = store.read_state()
    total = parse_int(state.duration)
    if math.isnan(total):
        logger.warning(f"[PLAYBACK] Duration {state.duration!r} is not a number, nothing to play.")
        print(f"duration {state.duration!r} is not a number", file=out)
        return 1
    app = app or QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    if args.vertical:
        view = TimelineViewModel(state, Axis.VERTICAL, QtTickScheduler())
    else:
        view = view_for_mode(state, QtTickScheduler())
    unsubscribe = store.subscribe(view.update_state)
    last_ms = [-1]

    def announce(elapsed_ms):
        playhead = view.playhead()
        for evt in view.events_between(last_ms[0], elapsed_ms):
            print(f"{playhead.label} [{view.css_property}: {playhead.offset}] {evt.text}", file=out)
        last_ms[0] = elapsed_ms
        if view.finished:
            unsubscribe()
            view.close()
            print(f"{playhead.label} done", file=out)
            app.quit()

    view.clock.elapsed_changed.connect(announce)
    announce(0)
    if view.clock.closed:
        return 0
    logger.info(f"[PLAYBACK] Replaying {len(state.events)} events over {format_number(total)}s.")
    view.clock.play()
    return app.exec_()


def main(argv=None):
    sys.excepthook = exception_hook
    args = build_parser().parse_args(argv)
    home = os.path.expanduser(args.home)
    config = ConfigManager(os.path.join(home, "config", constants.CONFIG_FILENAME))
    level = logging.getLevelName(str(config.get('log_level', 'DEBUG')).upper())
    setup_system(home, level if isinstance(level, int) else logging.DEBUG)
    logger.info("=== Booting Timeline Annotator ===")
    if args.command == "show":
        return run_show(args, config)
    elif args.command == "encode":
        return run_encode(args)
    elif args.command == "play":
        return run_play(args, config)


if __name__ == "__main__":
    sys.exit(main())
