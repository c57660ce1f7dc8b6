import queue
import threading


def start_daemon_thread(target, args=(), kwargs=None):
    """Start a daemon thread with a consistent helper API."""
    thread = threading.Thread(target=target, args=args, kwargs=kwargs or {}, daemon=True)
    thread.start()
    return thread


def run_with_deadline(target, timeout, args=(), kwargs=None, on_error=None):
    """
    Run target on a daemon thread and wait at most `timeout` seconds for it.

    Returns (finished, value). The worker posts into a single-slot channel;
    if the deadline passes first, whatever it posts later is never read.
    Exceptions raised by target are handed to on_error and reported as
    finished with a None value.
    """
    channel = queue.Queue(maxsize=1)

    def _run():
        try:
            value = target(*args, **(kwargs or {}))
        except Exception as exc:
            if on_error:
                on_error(exc)
            value = None
        channel.put(value)

    start_daemon_thread(_run)
    try:
        return True, channel.get(timeout=timeout)
    except queue.Empty:
        return False, None
