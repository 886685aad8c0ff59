# GitWise.py
"""
GitWise entry point.
  - cli.py: argument parsing and RunContext assembly
  - context.py: runtime configuration model
  - orchestrator.py: the commands themselves
  - GitWise.py: launcher and top-level error boundary
"""
import logging
import sys

logger = logging.getLogger(__name__)


def main():
    try:
        import cli

        exit_code = cli.run_cli()
    except KeyboardInterrupt:
        logger.warning("⚠️ Interrupted.")
        exit_code = 130
    except Exception as e:
        logger.error(f"❌ Unhandled error: {e}", exc_info=True)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
