"""Allow running the server with `python -m fetchmcp`."""

from fetchmcp.server import main

if __name__ == "__main__":
    main()
