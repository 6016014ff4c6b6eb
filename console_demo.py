"""
Offline console transport — chat with the booking bot from the terminal.

Every typed line becomes an InboundEvent for a single simulated chat and
goes through the real router, admission gate, dialogue engine and ledger.
Lines starting with ``/`` are tried as staff commands for ``--unit`` first.
A line starting with ``!`` is sent as a staff member typing on the
business account, which pauses the bot for this chat.

Usage:
    python console_demo.py
    python console_demo.py --unit bangu
    python console_demo.py --scenario booking
    python console_demo.py --scenario takeover
"""

import argparse
import asyncio
from typing import Optional

from src.app import BookingApp
from src.config import AppConfig, settings
from src.schemas.booking_schema import Unit
from src.schemas.conversation_schema import InboundEvent
from src.schemas.session_schema import ActiveSession

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CHAT_ID = "5521999887766@console"
STAFF_PREFIX = "!"


class ConsoleReplySender:
    """Prints bot replies instead of sending them over a chat network."""

    async def send_text(self, conversation_id: str, text: str) -> None:
        print(f"{GREEN}{BOLD}[Bot]{RESET} {GREEN}{text}{RESET}")


class ConsoleSession:
    """Feeds terminal input into the bot and shows what happens."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "booking": [
            "oi",
            "4",
            "A",
            "HOJE",
            "1",
            "Maria Silva",
            "21999887766",
            "SIM",
            "João Souza",
            "/vagas",
            "/relatorio",
        ],
        "bangu": [
            "4",
            "B",
            "25/12/2030",
            "7:15",
            "Al",
            "Ana Costa",
            "2133334444",
            "NAO",
        ],
        "takeover": [
            "3",
            "!Oi, aqui é o professor. Posso ajudar?",
            "Quero marcar uma aula",
            "MENU",
            "9",
            "alguém aí?",
            "/reativar",
        ],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self, config: AppConfig, unit: Unit = Unit.RECREIO) -> None:
        self.unit = unit
        self.app = BookingApp(config, ConsoleReplySender())

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  BOOKING BOT - {title}{RESET}")
        print(f"{BOLD}  Business: {self.app.config.business.name}{RESET}")
        print(f"{BOLD}  Staff commands for unit: {self.unit.value}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    async def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            await self._process_input(step)

        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
        print(f"{DIM}  Metrics: {self.app.metrics.model_dump()}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def run(self) -> None:
        self._banner("Console")
        print(f"{DIM}  Type 'quit' to exit, '{STAFF_PREFIX}text' to reply as staff{RESET}")

        while True:
            user_input = (await asyncio.to_thread(input, f"\n{BLUE}[Você] {RESET}")).strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return
            if len(user_input) > self.MAX_INPUT_LENGTH:
                print(f"{YELLOW}Mensagem muito longa, ignorada.{RESET}")
                continue
            await self._process_input(user_input, echo=False)

    async def _process_input(self, text: str, echo: bool = True) -> None:
        if text.startswith("/"):
            reply = self.app.admin.handle(self.unit, text)
            if reply is not None:
                if echo:
                    print(f"\n{YELLOW}[Staff] {RESET}{text}")
                print(f"{YELLOW}{BOLD}[Admin]{RESET} {YELLOW}{reply}{RESET}")
                return

        if text.startswith(STAFF_PREFIX):
            if echo:
                print(f"\n{YELLOW}[Staff] {RESET}{text[1:]}")
            event = InboundEvent(
                sender_id="business",
                conversation_id=CHAT_ID,
                text=text[1:],
                from_business_account=True,
            )
        else:
            if echo:
                print(f"\n{BLUE}[Você] {RESET}{text}")
            event = InboundEvent(sender_id=CHAT_ID, conversation_id=CHAT_ID, text=text)

        await self.app.router.handle_event(event)
        self.system_log(self._describe_state())

    def _describe_state(self) -> str:
        pause = self.app.gate.pauses.get(CHAT_ID)
        if pause is not None:
            return f"State: paused ({pause.reason.value})"
        session = self.app.sessions.load(CHAT_ID)
        if isinstance(session, ActiveSession):
            return f"State: {session.state.value}"
        return "State: idle"


async def run_console(config: AppConfig, scenario: Optional[str], unit: Unit) -> None:
    session = ConsoleSession(config, unit)
    app = session.app
    app.load_state()
    app.start()
    try:
        if scenario:
            await session.run_scenario(scenario)
        else:
            await session.run()
    finally:
        await app.stop()


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console transport")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument(
        "--unit",
        choices=[u.value for u in Unit],
        default=Unit.RECREIO.value,
        help="Unit whose staff commands '/' lines are run against",
    )
    args = parser.parse_args()

    try:
        asyncio.run(run_console(settings, args.scenario, Unit(args.unit)))
    except (KeyboardInterrupt, EOFError):
        print(f"\n{DIM}Session ended.{RESET}")


if __name__ == "__main__":
    main()
