#!/usr/bin/env python3
"""
Notebook AI CLI utilities.

Usage:
    python scripts/notebookai_cli.py notebooks
    python scripts/notebookai_cli.py history <notebook_id>
    python scripts/notebookai_cli.py diagnostics
"""

from __future__ import annotations

import argparse
from datetime import datetime

from notebookai_backend.config import get_settings, reset_settings_cache
from notebookai_backend.errors import NotFoundError
from notebookai_backend.services.notebook_store import NotebookStore


def human_ts(value: datetime | None) -> str:
    if not value:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M")


def cmd_notebooks(args: argparse.Namespace) -> None:
    reset_settings_cache()
    settings = get_settings()
    settings.ensure_directories()
    store = NotebookStore(settings)
    notebooks, total = store.list_notebooks(page=args.page, page_size=args.page_size)
    if not notebooks:
        print("No notebooks created yet.")
        return
    print(f"{'Notebook':<12} {'Title':<40} {'Sources':>7} {'Created'}")
    print("-" * 78)
    for notebook in notebooks:
        print(
            f"{notebook.id[:8]:<12} "
            f"{notebook.title[:39]:<40} "
            f"{notebook.source_count:>7} "
            f"{human_ts(notebook.created_at)}"
        )
    print(f"\nShowing {len(notebooks)} of {total}")


def cmd_history(args: argparse.Namespace) -> None:
    reset_settings_cache()
    settings = get_settings()
    store = NotebookStore(settings)
    try:
        store.get_notebook(args.notebook_id)
    except NotFoundError:
        raise SystemExit(f"Notebook {args.notebook_id} not found")
    conversation = store.find_conversation(args.notebook_id)
    if conversation is None:
        print("No conversation yet.")
        return
    for message in store.list_messages(conversation.id):
        print(f"[{human_ts(message.created_at)}] {message.role}: {message.content}\n")


def cmd_diagnostics(_: argparse.Namespace) -> None:
    reset_settings_cache()
    settings = get_settings()
    print("Configuration")
    print("-" * 40)
    print(f"Workspace: {settings.workspace_root}")
    print(f"Index dir: {settings.index_dir}")
    print(f"LLM Provider: {settings.llm_provider}")
    if settings.llm_provider == "openai":
        print(f"OpenAI Model: {settings.openai_model}")
        print(f"OpenAI API key set: {bool(settings.openai_api_key)}")
    elif settings.llm_provider == "ollama":
        print(f"Ollama Model: {settings.ollama_model} @ {settings.ollama_base_url}")
    print(f"Embedding Backend: {settings.embedding_backend} ({settings.embedding_model})")
    print(f"Max chunk size: {settings.max_chunk_size}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Notebook AI utility CLI")
    sub = parser.add_subparsers(dest="command", required=True)
    notebooks_parser = sub.add_parser("notebooks", help="List notebooks, newest first")
    notebooks_parser.add_argument("--page", type=int, default=1)
    notebooks_parser.add_argument("--page-size", type=int, default=12)
    history_parser = sub.add_parser("history", help="Print a notebook's conversation")
    history_parser.add_argument("notebook_id")
    sub.add_parser("diagnostics", help="Show configuration")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    if args.command == "notebooks":
        cmd_notebooks(args)
    elif args.command == "history":
        cmd_history(args)
    elif args.command == "diagnostics":
        cmd_diagnostics(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
