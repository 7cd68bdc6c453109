"""
Allow running as `python -m marathon2consul`.
"""

from marathon2consul.cli.app import run


if __name__ == "__main__":
    run()
