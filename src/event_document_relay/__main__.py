from __future__ import annotations

from event_document_relay.app import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
