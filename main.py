"""Interactive CLI for the reactAgent orchestrator."""

from reactAgent.cli import main

if __name__ == "__main__":
    main()
