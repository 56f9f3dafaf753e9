"""Interactive terminal flow — prompts a human, then calls the registry."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

from holonid.identity.model import (
    CLADES,
    PINNING_FIELDS,
    REPRODUCTION_MODES,
    default_dir_name,
    new_identity,
)
from holonid.identity.registry import CONVENTION_DIR

if TYPE_CHECKING:
    from holonid.core import IdentityRegistry

logger = logging.getLogger(__name__)

_PIN_PROMPTS = {
    "binary_path": "Binary path",
    "binary_version": "Binary version",
    "git_tag": "Git tag (or empty)",
    "git_commit": "Git commit (or empty)",
    "os": "OS",
    "arch": "Arch",
}


class InteractiveCLI:
    """Line-oriented prompts over stdin/stdout."""

    def __init__(
        self,
        registry: IdentityRegistry,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.registry = registry
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout

    # ── Commands ──────────────────────────────────────────────

    def run_new(self) -> None:
        """Create a new holon identity from prompted answers."""
        self._print("─── Sophia Who? — New Holon Identity ───")

        identity = new_identity()
        self._print(f"UUID: {identity.uuid} (generated)\n")

        identity.family_name = self._ask("Family name (the function — e.g. Transcriber, Prober)")
        identity.given_name = self._ask("Given name (the character — e.g. Swift, Deep)")
        identity.composer = self._ask("Composer (who is making this decision?)")
        identity.motto = self._ask("Motto (the dessein in one sentence)")

        self._print("\nClade (computational nature):")
        identity.clade = self._ask_choice("Choose clade", CLADES)

        self._print("\nReproduction mode:")
        identity.reproduction = self._ask_choice("Choose reproduction mode", REPRODUCTION_MODES)

        identity.lang = self._ask_default(
            "Implementation language", self.registry.config.registry.default_lang
        )

        aliases = self._ask_default("Aliases (comma-separated, or empty)", "")
        identity.aliases = [a.strip() for a in aliases.split(",") if a.strip()]

        license_ = self._ask_default("Wrapped binary license (e.g. MIT, GPL-3.0, or empty)", "")
        identity.wrapped_license = license_ or None

        default_dir = f"{CONVENTION_DIR}/{default_dir_name(identity)}"
        output_dir = self._ask_default("Output directory", default_dir)

        path = self.registry.create(identity, output_dir)

        self._print(f"\n✓ Born: {identity.display_name}")
        self._print(f"  UUID: {identity.uuid}")
        self._print(f"  File: {path}")

    def run_show(self, target: str) -> None:
        """Print a holon's document as stored."""
        path = self.registry.find(target)
        self._print(self.registry.read_raw(path))

    def run_list(self) -> None:
        """Print a summary table of every holon under the root."""
        holons = self.registry.find_all()
        if not holons:
            self._print("No holons found.")
            return

        self._print(f"{'UUID':<38} {'NAME':<20} {'CLADE':<30} STATUS")
        self._print("─" * 100)
        for h in holons:
            self._print(f"{h.uuid:<38} {h.display_name:<20} {h.clade:<30} {h.status or '-'}")

    def run_pin(self, target: str) -> None:
        """Prompt for binary-pinning values, keeping current ones as defaults."""
        path = self.registry.find(target)
        identity, _ = self.registry.read(path)

        self._print(f"─── Pin version for {identity.display_name} ───\n")
        answers = {
            name: self._ask_default(_PIN_PROMPTS[name], getattr(identity, name) or "")
            for name in PINNING_FIELDS
        }
        self.registry.update(path, {name: value or None for name, value in answers.items()})

        self._print(f"\n✓ Pinned: {identity.display_name}")

    # ── Prompts ───────────────────────────────────────────────

    def _print(self, text: str) -> None:
        self._out.write(text + "\n")
        self._out.flush()

    def _readline(self) -> str:
        line = self._in.readline()
        if not line:
            raise EOFError("input closed")
        return line.strip()

    def _ask(self, prompt: str) -> str:
        """Required answer; re-asks until non-empty."""
        while True:
            self._out.write(f"{prompt}: ")
            self._out.flush()
            answer = self._readline()
            if answer:
                return answer
            self._print("  (required)")

    def _ask_default(self, prompt: str, default: str) -> str:
        if default:
            self._out.write(f"{prompt} [{default}]: ")
        else:
            self._out.write(f"{prompt}: ")
        self._out.flush()
        return self._readline() or default

    def _ask_choice(self, prompt: str, choices: tuple[str, ...]) -> str:
        """Accept either the 1-based number or the literal choice."""
        for i, choice in enumerate(choices, 1):
            self._print(f"  {i}. {choice}")
        while True:
            self._out.write(f"{prompt} (1-{len(choices)}): ")
            self._out.flush()
            answer = self._readline()
            for i, choice in enumerate(choices, 1):
                if answer in (str(i), choice):
                    return choice
            self._print("  (invalid choice)")
