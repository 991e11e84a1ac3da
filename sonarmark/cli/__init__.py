"""SonarMark command-line interface."""
