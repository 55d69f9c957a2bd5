"""Entry point for vm_batch."""

from .cli import cli


def main() -> None:
    """Entry point for the vm-batch CLI."""
    cli()


if __name__ == "__main__":
    main()
