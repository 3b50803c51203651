"""Console mailer for demo/dev mode.

Prints messages to stdout so developers can follow activation and
reset links without an SMTP setup.
"""

from gatehouse.core.auth.mailer import Mailer


class ConsoleMailer:
    """Prints outbound email instead of sending it."""

    async def send(self, to: str, subject: str, html_body: str) -> None:
        """Print the message to the console."""
        # Print with clear formatting so it's visible in logs
        print("\n" + "=" * 70, flush=True)
        print(f"[EMAIL] {subject}", flush=True)
        print(f"  To: {to}", flush=True)
        print(html_body.strip(), flush=True)
        print("=" * 70 + "\n", flush=True)


# Verify we implement the protocol
_mailer: Mailer = ConsoleMailer()
