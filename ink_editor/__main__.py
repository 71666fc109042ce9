#!/usr/bin/env python
"""
CLI entry point for the ink editor.

Usage:
    python -m ink_editor replay session.json --document notes.txt
    python -m ink_editor templates
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List

from ink_editor.configs.editor_config import (
    DEFAULT_CHAR_HEIGHT,
    DEFAULT_CHAR_WIDTH,
    EditorConfig,
    default_template_path,
)
from ink_editor.data.ink import Ink
from ink_editor.data.templates import TemplateStore
from ink_editor.data.text_buffer import TextBuffer
from ink_editor.model.edit_session import EditSession, SharedState

logger = logging.getLogger("ink_editor")


def setup_logging(verbose: bool = False):
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(asctime)s | %(message)s', datefmt='%H:%M:%S'))
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


def replay(session: EditSession, shared: SharedState, events: List[Dict]) -> str:
    """Feed recorded ink events through a session and return the final text."""
    for i, event in enumerate(events):
        if event.get('undo'):
            session.undo()
        else:
            session.ink_row(Ink.from_string(event['ink']), int(event['row']), shared)
        logger.debug("Event %d -> %r", i, session.buffer.content_string())
    return session.buffer.content_string()


def cmd_replay(args) -> int:
    config = EditorConfig(char_height=args.cell_height, char_width=args.cell_width,
                          template_path=Path(args.templates))
    metrics = config.metrics()
    store = TemplateStore.load(config.template_path, metrics.height)
    shared = SharedState.create(store, metrics)

    document = Path(args.document).read_text('utf-8') if args.document else ""
    session = EditSession(TextBuffer.from_string(document), metrics,
                          num_recent_recognitions=config.num_recent_recognitions)

    with open(args.session, 'r', encoding='utf-8') as f:
        events = json.load(f)
    logger.info("Replaying %d events", len(events))
    text = replay(session, shared, events)

    if args.output:
        Path(args.output).write_text(text, 'utf-8')
        logger.info("Wrote %s", args.output)
    else:
        print(text)
    return 0


def cmd_templates(args) -> int:
    store = TemplateStore.load(args.templates, args.cell_height)
    for char, count in store.counts().items():
        print(f"{char!r:>6}: {count}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Handwriting-driven text editing engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Apply a recorded pen session to a document
  python -m ink_editor replay session.json --document notes.txt --output notes.txt

  # Inspect the template database
  python -m ink_editor templates
        """
    )
    parser.add_argument("--templates", type=str, default=str(default_template_path()),
                        help="Template database (JSON)")
    parser.add_argument("--cell-height", type=int, default=DEFAULT_CHAR_HEIGHT)
    parser.add_argument("--cell-width", type=int, default=DEFAULT_CHAR_WIDTH)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    replay_parser = sub.add_parser("replay", help="Replay recorded ink events")
    replay_parser.add_argument("session", type=str,
                               help='JSON list of {"row": r, "ink": "..."} or {"undo": true}')
    replay_parser.add_argument("--document", type=str, default=None,
                               help="Initial document (default: empty)")
    replay_parser.add_argument("--output", "-o", type=str, default=None,
                               help="Write the result here instead of stdout")
    replay_parser.set_defaults(func=cmd_replay)

    templates_parser = sub.add_parser("templates", help="Show template counts")
    templates_parser.set_defaults(func=cmd_templates)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        return args.func(args)
    except (OSError, ValueError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
