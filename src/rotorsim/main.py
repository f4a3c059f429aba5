"""Main entry point for the rotorsim package."""
from rotorsim.cli import cli


def main():
    """Main entry point function. Options may also come from ROTORSIM_* environment variables."""
    cli(auto_envvar_prefix="ROTORSIM")


if __name__ == "__main__":
    main()
