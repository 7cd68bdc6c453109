"""
Output - Console output formatting.

Provides pretty-printed output with colors and formatting.
"""

import json
import sys

from marathon2consul.application.sync import SyncResult
from marathon2consul.core.translation import TranslationResult


class Colors:
    """
    ANSI color codes for terminal output.

    Attributes:
        RESET: Reset all formatting to default.
        BOLD: Make text bold.
        DIM: Make text dimmed/faded.
        RED: Red text color.
        GREEN: Green text color.
        YELLOW: Yellow text color.
        BLUE: Blue text color.
        CYAN: Cyan text color.
        BG_YELLOW: Yellow background color.
    """

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"

    BG_YELLOW = "\033[43m"


class Symbols:
    """Unicode symbols for terminal output."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO = "ℹ"
    GEAR = "⚙"

    BOX_H = "─"


class Console:
    """
    Console output helper with colors and formatting.

    Attributes:
        color: Whether to use ANSI color codes.
        verbose: Whether to print debug messages.
        quiet: Whether to suppress most output (for scripting).
        json_mode: Whether to output JSON format for programmatic use.
    """

    def __init__(
        self,
        color: bool = True,
        verbose: bool = False,
        quiet: bool = False,
        json_mode: bool = False,
    ):
        """
        Initialize the console output helper.

        Args:
            color: Enable colored output. Automatically disabled if stdout is not a TTY.
            verbose: Enable verbose debug output.
            quiet: Suppress most output, only show errors and final summary.
            json_mode: Output JSON format instead of text.
        """
        self.json_mode = json_mode
        self.color = color and sys.stdout.isatty() and not json_mode
        self.verbose = verbose
        self.quiet = quiet or json_mode

        self._json_errors: list[str] = []

        if self.quiet:
            self.verbose = False

    def _c(self, text: str, *codes: str) -> str:
        if not self.color:
            return text
        return "".join(codes) + text + Colors.RESET

    def print(self, text: str = "", force: bool = False) -> None:
        """
        Print text to stdout.

        Args:
            text: Text to print. Defaults to empty string for blank line.
            force: Print even in quiet mode.
        """
        if self.quiet and not force:
            return
        print(text)

    def header(self, text: str) -> None:
        """Print a prominent header with borders."""
        if self.quiet:
            return
        width = max(len(text) + 4, 50)
        border = Colors.CYAN + Symbols.BOX_H * width + Colors.RESET if self.color else "-" * width

        self.print()
        self.print(border)
        self.print(self._c(f"  {text}", Colors.BOLD, Colors.CYAN))
        self.print(border)
        self.print()

    def section(self, text: str) -> None:
        """Print a section header."""
        if self.quiet:
            return
        self.print()
        self.print(self._c(f"{Symbols.ARROW} {text}", Colors.BOLD, Colors.BLUE))

    def success(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.CHECK} {text}", Colors.GREEN))

    def error(self, text: str) -> None:
        """
        Print an error message with cross symbol.

        Always prints, even in quiet mode. Collected in JSON mode.
        """
        if self.json_mode:
            self._json_errors.append(text)
            return
        print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED), file=sys.stderr)

    def config_errors(self, errors: list[str]) -> None:
        """Print configuration errors with a hint on where settings come from."""
        if self.json_mode:
            self._json_errors.extend(errors)
            self.flush_errors()
            return
        self.error("Configuration errors:")
        for error in errors:
            print(f"    {Symbols.DOT} {error}", file=sys.stderr)
        print(
            "    Set them with CLI flags, environment variables or .marathon2consul.yaml",
            file=sys.stderr,
        )

    def connection_error(self, service: str, url: str = "") -> None:
        """Print a connection failure for Marathon or Consul."""
        target = f"{service} at {url}" if url else service
        if self.json_mode:
            self._json_errors.append(f"Connection failed: {target}")
            self.flush_errors()
            return
        self.error(f"Cannot connect to {target}")
        print("    Check the address and the credentials", file=sys.stderr)

    def flush_errors(self) -> None:
        """Emit collected errors as a JSON object (JSON mode only)."""
        if self.json_mode and self._json_errors:
            print(json.dumps({"success": False, "errors": self._json_errors}, indent=2))
            self._json_errors = []

    def warning(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.WARN} {text}", Colors.YELLOW))

    def info(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.INFO} {text}", Colors.CYAN))

    def detail(self, text: str) -> None:
        """Print detail text in dimmed color with extra indentation."""
        if self.quiet:
            return
        self.print(self._c(f"    {text}", Colors.DIM))

    def debug(self, text: str) -> None:
        """Print debug message (only visible in verbose mode)."""
        if self.verbose:
            self.print(self._c(f"  [DEBUG] {text}", Colors.DIM))

    def item(self, text: str, status: str | None = None) -> None:
        """
        Print a list item with optional status indicator.

        Args:
            text: Item text to display.
            status: "ok", "skip", "fail" or any label shown dimmed.
        """
        if self.quiet:
            return
        status_str = ""
        if status == "ok":
            status_str = self._c(f" [{Symbols.CHECK}]", Colors.GREEN)
        elif status == "skip":
            status_str = self._c(" [SKIP]", Colors.YELLOW)
        elif status == "fail":
            status_str = self._c(f" [{Symbols.CROSS}]", Colors.RED)
        elif status:
            status_str = self._c(f" [{status}]", Colors.DIM)

        self.print(f"    {Symbols.DOT} {text}{status_str}")

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """Print a formatted table, column widths fitted to content."""
        if self.quiet:
            return
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = "  " + "  ".join(
            self._c(h.ljust(widths[i]), Colors.BOLD) for i, h in enumerate(headers)
        )
        self.print(header_line)
        self.print("  " + "  ".join("-" * w for w in widths))

        for row in rows:
            row_line = "  " + "  ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(row)
            )
            self.print(row_line)

    def dry_run_banner(self) -> None:
        """Print a prominent dry-run mode banner."""
        if self.quiet:
            return
        self.print()
        banner = f"  {Symbols.GEAR} DRY-RUN MODE - No changes will be made"
        if self.color:
            self.print(f"{Colors.BG_YELLOW}{Colors.BOLD}{banner}{Colors.RESET}")
        else:
            self.print(f"*** {banner} ***")
        self.print()

    def registrations(self, result: TranslationResult) -> None:
        """
        Print the registrations a translation produced.

        In JSON mode the full Consul payloads are written to stdout.
        """
        if self.json_mode:
            output = result.to_dict()
            output["errors"] = self._json_errors
            print(json.dumps(output, indent=2))
            return

        if self.quiet:
            print(" ".join(result.service_ids))
            return

        self.section(f"Registrations for {result.app_id}")
        if not result.registrations:
            self.warning("No registrations (no eligible ports)")

        rows = []
        for registration in result.registrations:
            rows.append(
                [
                    registration.id,
                    registration.name,
                    str(registration.port),
                    str(len(registration.checks)),
                    str(registration.weights.passing),
                ]
            )
        if rows:
            self.table(["ID", "Name", "Port", "Checks", "Weight"], rows)

        if self.verbose:
            for registration in result.registrations:
                self.print()
                self.print(json.dumps(registration.to_dict(), indent=2))

        if result.warnings:
            self.print()
            self.warning(f"{len(result.warnings)} warning(s):")
            for warning in result.warnings[:5]:
                self.detail(str(warning))
            if len(result.warnings) > 5:
                self.detail(f"... and {len(result.warnings) - 5} more")

    def sync_result(self, result: SyncResult) -> None:
        """
        Print a formatted sync result summary.

        In JSON mode, outputs a structured JSON object.
        In quiet mode, prints a single line summary for scripting.
        """
        if self.json_mode:
            output = {
                "success": result.success,
                "dry_run": result.dry_run,
                "app_id": result.app_id,
                "stats": {
                    "services_planned": result.services_planned,
                    "services_registered": result.services_registered,
                    "services_deregistered": result.services_deregistered,
                },
                "registered": result.registered_ids,
                "deregistered": result.deregistered_ids,
                "errors": result.errors + self._json_errors,
                "warnings": result.warnings,
            }
            if result.failed_operations:
                output["failed_operations"] = [
                    {
                        "operation": op.operation,
                        "service_id": op.service_id,
                        "error": op.error,
                    }
                    for op in result.failed_operations
                ]
            print(json.dumps(output, indent=2))
            return

        if self.quiet:
            status = "OK" if result.success else "FAILED"
            mode = "dry-run" if result.dry_run else "executed"
            parts = [
                f"status={status}",
                f"mode={mode}",
                f"planned={result.services_planned}",
                f"registered={result.services_registered}",
            ]
            if result.services_deregistered:
                parts.append(f"deregistered={result.services_deregistered}")
            if result.errors:
                parts.append(f"errors={len(result.errors)}")
            print(" ".join(parts))

            for e in result.errors:
                print(f"ERROR: {e}")
            return

        self.section("Sync Complete")
        self.print()

        if result.dry_run:
            mode_text = f"{Symbols.GEAR} Mode: DRY-RUN (no changes made)"
            self.print("  " + self._c(mode_text, Colors.YELLOW))
        else:
            mode_text = f"{Symbols.CHECK} Mode: LIVE EXECUTION"
            self.print("  " + self._c(mode_text, Colors.GREEN))
        self.print()

        stats = [
            ["Planned", str(result.services_planned)],
            ["Registered", str(result.services_registered)],
        ]
        if result.services_deregistered:
            stats.append(["Deregistered", str(result.services_deregistered)])
        self.table(["Services", "Count"], stats)

        for service_id in result.registered_ids:
            self.item(service_id, "ok")
        for service_id in result.deregistered_ids:
            self.item(service_id, "removed")
        for failed in result.failed_operations:
            self.item(failed.service_id, "fail")

        if result.warnings:
            self.print()
            self.warning(f"{len(result.warnings)} warning(s):")
            for w in result.warnings[:5]:
                self.detail(w)
            if len(result.warnings) > 5:
                self.detail(f"... and {len(result.warnings) - 5} more")

        if result.errors:
            self.print()
            self.error(f"{len(result.errors)} error(s):")
            for e in result.errors[:5]:
                self.detail(e)
            if len(result.errors) > 5:
                self.detail(f"... and {len(result.errors) - 5} more")

        self.print()
        if result.success:
            self.success("Sync completed successfully!")
        elif result.partial_success:
            self.warning("Sync completed with errors")
        else:
            self.error("Sync failed")
