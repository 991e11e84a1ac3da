"""Allow running SonarMark with ``python -m sonarmark``."""

from sonarmark.cli.app import run

if __name__ == "__main__":
    run()
