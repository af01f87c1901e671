#!/usr/bin/env python3
"""Ad hoc query runner for ChefMate.

Run one recipe turn directly without starting the API server.

Usage:
    python query.py "chicken, rice and carrots"
    python query.py --user alice "eggs & spinach"
    python query.py --profile profile.json "pasta, garlic, olive oil"
    python query.py --debug "chicken and rice"   # Show full message JSON
    python query.py --history --user alice       # Print stored chat history

Features:
- Ingredient text parsed the same way as the chat input (",", "&", "and")
- Profile from a JSON file (cuisinePreferences, dietaryNeeds, skillLevel, location)
  or from the store when omitted
- Markdown rendering of the recipe with rich
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from chefmate.conversation.orchestrator import ConversationOrchestrator
from chefmate.generation.recipe_service import RecipeGenerationService
from chefmate.ingredients.normalizer import parse_bulk_input
from chefmate.models.models import Message, UserProfile
from chefmate.storage.chat_history import ChatHistoryStore
from chefmate.storage.kv_store import create_kv_store
from chefmate.storage.profile_store import ProfileStore
from chefmate.utils.config import config
from chefmate.utils.errors import ChefMateError
from chefmate.utils.logger import logger

console = Console()


def load_profile_file(path: str) -> UserProfile:
    """Read a UserProfile from a JSON file."""
    profile_file = Path(path)
    if not profile_file.exists():
        console.print(f"[red]✗ Error: Profile file not found: {path}[/red]")
        sys.exit(1)
    with open(profile_file, "r", encoding="utf-8") as f:
        return UserProfile.model_validate(json.load(f))


def print_message(message: Message, debug: bool = False) -> None:
    if debug:
        console.print("[bold cyan]Debug Mode: Full Message[/bold cyan]")
        console.print_json(data=message.model_dump())
        console.print()

    speaker = "👨‍🍳 ChefMate" if message.role == "assistant" else "🧑 You"
    console.print(f"[bold]{speaker}[/bold] [dim]{message.timestamp}[/dim]")
    if message.recipe:
        console.print(Markdown(str(message.recipe)))
    else:
        console.print(message.text)
    console.print()


async def run_query(text: str, user_id: str, profile: Optional[UserProfile], debug: bool) -> int:
    store = create_kv_store(config)
    try:
        orchestrator = ConversationOrchestrator(
            ChatHistoryStore(store, max_messages=config.MAX_HISTORY_MESSAGES),
            ProfileStore(store),
            RecipeGenerationService(config),
        )
        ingredients = parse_bulk_input(text)
        logger.info(f"Parsed ingredients: {list(ingredients)}")
        reply = await orchestrator.ask_for_recipe(user_id, ingredients, profile)
        console.print()
        print_message(reply, debug=debug)
        return 0
    finally:
        store.close()


async def show_history(user_id: str, debug: bool) -> int:
    store = create_kv_store(config)
    try:
        messages = await ChatHistoryStore(store).load_history(user_id)
        if not messages:
            console.print(f"[yellow]No chat history for {user_id}[/yellow]")
        for message in messages:
            print_message(message, debug=debug)
        return 0
    finally:
        store.close()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Ask ChefMate for a recipe from the command line.")
    parser.add_argument("ingredients", nargs="*", help='Ingredient text, e.g. "chicken, rice and carrots"')
    parser.add_argument("--user", default="cli_user", help="User identifier (default: cli_user)")
    parser.add_argument("--profile", help="Path to a profile JSON file")
    parser.add_argument("--history", action="store_true", help="Print the user's chat history and exit")
    parser.add_argument("--debug", action="store_true", help="Print full message JSON")
    args = parser.parse_args(argv)

    try:
        if args.history:
            return asyncio.run(show_history(args.user, args.debug))

        if not args.ingredients:
            parser.error("No ingredients provided")

        profile = load_profile_file(args.profile) if args.profile else None
        return asyncio.run(run_query(" ".join(args.ingredients), args.user, profile, args.debug))
    except ChefMateError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        return 1
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
