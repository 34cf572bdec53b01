#!/usr/bin/env python3
"""Terminal front end for Thunder GPT.

    thunder "Explain quantum computing"     one-shot send in the latest chat
    thunder --new                            start a fresh chat, then prompt
    thunder --list                           show saved chats, newest first
    thunder --chat 1717171717171             continue a saved chat
"""
import argparse
import sys

from client.api import ChatClient
from client.render import QUICK_ACTIONS, chat_list, format_chat_list, format_transcript, message_rows
from client.session import ChatSession
from client.storage import JsonFileStorage
from client.store import ConversationStore
from config.settings import get_settings


HELP = "Commands: /new  /list  /open ID  /theme NAME  /quick N  /quit"


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="thunder", description="Thunder GPT terminal client")
    parser.add_argument("--backend", default=settings.backend_url, help="backend base URL")
    parser.add_argument("--storage", default=settings.storage_path, help="chat history file")
    parser.add_argument("--timeout", type=float, default=settings.client_timeout,
                        help="seconds to wait for a reply")
    parser.add_argument("--list", action="store_true", help="list saved chats and exit")
    parser.add_argument("--chat", help="open a saved chat by id")
    parser.add_argument("--new", action="store_true", help="start a new chat")
    parser.add_argument("--theme", help="save the preferred theme")
    parser.add_argument("prompt", nargs="?", help="message to send (interactive mode if omitted)")
    return parser


def _send_and_print(session: ChatSession, text: str) -> bool:
    result = session.send(text)
    if result.reply is not None:
        print(f"Thunder: {result.reply}")
    if result.notification:
        print(result.notification, file=sys.stderr)
        return False
    return True


def _handle_command(session: ChatSession, line: str) -> bool:
    """Run one slash command. Returns False when the loop should stop."""
    cmd, _, arg = line.partition(" ")
    arg = arg.strip()
    store = session.store

    if cmd in ("/quit", "/exit"):
        return False
    if cmd == "/new":
        session.new_chat()
        print(format_transcript([]))
    elif cmd == "/list":
        print(format_chat_list(chat_list(store)))
    elif cmd == "/open":
        if session.open_chat(arg):
            print(format_transcript(message_rows(store.history)))
        else:
            print(f"No chat with id {arg!r}")
    elif cmd == "/theme":
        if arg:
            print(session.change_theme(arg))
        else:
            print(f"Current theme: {store.get_theme()}")
    elif cmd == "/quick":
        try:
            action = QUICK_ACTIONS[int(arg) - 1]
        except (ValueError, IndexError):
            print(f"Pick a quick action between 1 and {len(QUICK_ACTIONS)}")
        else:
            print(f"You: {action}")
            _send_and_print(session, action)
    else:
        print(HELP)
    return True


def interactive(session: ChatSession) -> None:
    print(format_transcript(message_rows(session.store.history)))
    print(HELP)
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not line:
            continue
        if line.startswith("/"):
            if not _handle_command(session, line):
                return
            continue
        _send_and_print(session, line)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    store = ConversationStore(JsonFileStorage(args.storage))

    if args.theme:
        store.set_theme(args.theme)
        print("Theme updated!")
        if not (args.list or args.chat or args.new or args.prompt):
            return 0

    if args.list:
        print(format_chat_list(chat_list(store)))
        return 0

    if args.chat:
        if not store.load_chat(args.chat):
            print(f"No chat with id {args.chat!r}", file=sys.stderr)
            return 1
    elif not args.new:
        latest = store.list_chats()
        if latest:
            store.load_chat(latest[0].id)
    if args.new:
        store.create_chat()

    with ChatClient(args.backend, timeout=args.timeout) as api:
        session = ChatSession(store, api)
        if args.prompt:
            return 0 if _send_and_print(session, args.prompt) else 1
        interactive(session)
    return 0


if __name__ == "__main__":
    sys.exit(main())
