"""
Allow running the package with: python -m photosweep

Examples:
    python -m photosweep /path/to/photos     # Analyze and print a report
    python -m photosweep config              # Show configuration
    python -m photosweep config --init       # Create example config file
"""

import sys


def main():
    if len(sys.argv) > 1 and sys.argv[1] == 'config':
        sys.argv.pop(1)
        from .user_config import get_user_config

        config = get_user_config()

        if '--init' in sys.argv or '-i' in sys.argv:
            if config.create_example_config():
                print("✓ Created example configuration file at:")
                print(f"  {config.config_file_path}")
                print("\nEdit this file to customize PhotoSweep settings.")
            else:
                print("✗ Failed to create configuration file.")
                sys.exit(1)
        else:
            print(f"Configuration file: {config.config_file_path}")
            if config.config_file_path.exists():
                print("Status: ✓ Found")
            else:
                print("Status: ✗ Not found (using defaults)")
                print("\nRun 'python -m photosweep config --init' to create one.")

            print("\nCurrent settings:")
            print(f"  default_workers: {config.default_workers}")
            print(f"  exclude_failed_fingerprints: {config.exclude_failed_fingerprints}")
            max_pixels = config.max_image_pixels
            limit = "no limit" if max_pixels is None else f"{max_pixels:,}"
            print(f"  max_image_pixels: {limit}")

            from .scanner import has_heif_support
            print(f"  HEIC/HEIF support: {'yes' if has_heif_support() else 'no (pip install pillow-heif)'}")
    else:
        from .cli import main as cli_main
        sys.exit(cli_main())


if __name__ == '__main__':
    main()
