"""Run the textpatch-mcp server: ``python -m textpatch_mcp`` or ``textpatch-mcp``."""


def main() -> None:
    # tools must be imported before the server starts so its @mcp.tool()
    # registrations exist when FastMCP lists tools
    from . import tools  # noqa: F401
    from .server import main as run_server

    run_server()


if __name__ == "__main__":
    main()
