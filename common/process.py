"""Process-level safety net for uncaught exceptions."""
import logging
import sys
import threading

logger = logging.getLogger(__name__)

_installed = False


def _log_and_exit(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical(
        "Uncaught exception, shutting down",
        exc_info=(exc_type, exc_value, exc_traceback),
    )
    logging.shutdown()
    # The interpreter exits with status 1 once the hook returns.


def _thread_hook(args):
    if args.exc_type is SystemExit:
        return
    # Worker threads log and die; the process keeps serving.
    logger.critical(
        "Uncaught exception in thread %s",
        args.thread.name if args.thread else "?",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )


def install_crash_handler() -> None:
    global _installed
    if _installed:
        return
    sys.excepthook = _log_and_exit
    threading.excepthook = _thread_hook
    _installed = True
