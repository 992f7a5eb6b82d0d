"""
Allow running the package with: python -m photoprint

Examples:
    python -m photoprint -g -s ~/Pictures -d ~/fingerprints
    python -m photoprint -f -s ~/fingerprints -d /mnt/phone --low-threshold 10 --high-threshold 1000
    python -m photoprint -m -s ~/Pictures
    python -m photoprint config            # Show the user configuration
    python -m photoprint config --init     # Create example config file
"""

import sys


def show_config(argv) -> int:
    from .user_config import get_user_config

    config = get_user_config()

    if '--init' in argv or '-i' in argv:
        if config.create_example_config():
            print("✓ Created example configuration file at:")
            print(f"  {config.config_file_path}")
            print("\nEdit this file to customize photoprint settings.")
            return 0
        print("✗ Failed to create configuration file.")
        return 1

    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: ✓ Found")
    else:
        print("Status: ✗ Not found (using defaults)")
        print("\nRun 'python -m photoprint config --init' to create one.")

    print("\nCurrent settings:")
    print(f"  default_workers: {config.default_workers}")
    print(f"  fuzz_factor: {config.fuzz_factor}")
    print(f"  low_threshold: {config.low_threshold}")
    print(f"  high_threshold: {config.high_threshold}")
    print(f"  fingerprint_size: {config.fingerprint_size}")
    print(f"  bit_depth: {config.bit_depth}")
    print(f"  extensions: {', '.join(sorted(config.extensions))}")
    return 0


def main():
    if len(sys.argv) > 1 and sys.argv[1] == 'config':
        sys.exit(show_config(sys.argv[2:]))

    from .cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
