"""Console entry point for shellagent."""

from shellagent.cli import main


if __name__ == "__main__":
    main()
