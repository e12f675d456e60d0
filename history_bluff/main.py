"""Terminal hot-seat version of the game."""

import asyncio
import logging
from typing import Optional

from .domain.models.fact import Fact
from .domain.models.game import GamePhase, GameState
from .domain.models.results import OperationResult
from .domain.services import game_rules
from .domain.services.game_service import GameService
from .infrastructure.config import HistoryBluffConfig
from .infrastructure.dependencies import ServiceContainer

HELP = "Type an event, 'call <your name>' to call out the last event, or 'quit'."


def _print_status(state: GameState) -> None:
    anchor = state.anchor
    last = state.chain.last
    print()
    if anchor is not None:
        print(f"Anchor: {anchor.fact.title} ({anchor.fact.calendar_date.display()})")
    if last is not None and not last.is_resolved:
        print(f"Latest: {last.fact.title} ({last.fact.calendar_date.display()}) by {last.submitting_player_name}")
    print(f"Buffer: {state.current_tolerance} years")
    alive = ", ".join(player.name for player in state.alive_players)
    print(f"Alive: {alive}")


async def _choose_candidate(service: GameService, query: str) -> Optional[Fact]:
    result = await service.lookup_event(query)
    if not result.success:
        print(result.message)
        return None

    for number, fact in enumerate(result.candidates, 1):
        print(f"  {number}. {fact.title} ({fact.calendar_date.display()})")
    choice = input("Pick a number (Enter to cancel): ").strip()
    if not choice.isdigit() or not 1 <= int(choice) <= len(result.candidates):
        return None
    return result.candidates[int(choice) - 1]


async def _challenge(service: GameService, state: GameState, name: str) -> OperationResult:
    for player in state.players:
        if player.name.casefold() == name.casefold():
            return await service.challenge(state.id, player.id)
    return OperationResult(success=False, message=f"No player named '{name}'")


async def play(container: ServiceContainer) -> None:
    """Run one game in the terminal."""
    service = await container.get_game_service()

    names = [name.strip() for name in input("Player names (comma separated): ").split(",") if name.strip()]
    century = input("Starting century [12]: ").strip() or "12"

    created = await service.create_game(names[0] if names else "")
    if not created.success:
        print(created.message)
        return
    game_id = created.state.id

    result = await service.set_players(game_id, names)
    if result.success:
        starting_century = int(century) if century.isdigit() else 0
        result = await service.update_settings(game_id, starting_century=starting_century)
    if not result.success:
        print(result.message)
        return

    print("Finding a starting event...")
    started = await service.start_game(game_id)
    print(started.message)
    if not started.success:
        return

    print(HELP)
    state = started.state
    while state.phase == GamePhase.PLAYING:
        _print_status(state)
        text = input(f"{state.current_player.name}> ").strip()
        if text.lower() in ('quit', 'exit', 'q'):
            return
        if not text:
            print(HELP)
            continue

        if text.lower().startswith("call "):
            result = await _challenge(service, state, text[5:].strip())
        else:
            fact = await _choose_candidate(service, text)
            if fact is None:
                continue
            result = await service.submit_fact(game_id, fact)

        print(result.message)
        if result.state is not None:
            state = result.state

    champion = game_rules.winner(state)
    if champion is not None:
        print(f"\n{champion.name} wins!")


async def main():
    """Run the terminal game."""
    print("History Bluff - name events, call out the bluffs")
    print("------------------------------------------------")

    config = HistoryBluffConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    container = ServiceContainer(config)
    try:
        await play(container)
    finally:
        # Clean up
        await container.shutdown()


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
