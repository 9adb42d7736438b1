"""Entry point for the development StatsD collector."""

import argparse
import logging
import signal
import sys
import threading

from statsd_client.collector import StatsdCollector


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(description="Development StatsD collector")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    parser.add_argument("--port", type=int, default=8125, help="Bind port")
    args = parser.parse_args()

    shutdown_event = threading.Event()

    def signal_handler(signum, frame):
        logging.getLogger(__name__).info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    collector = StatsdCollector(args.host, args.port, shutdown_event)
    try:
        collector.start()
    finally:
        collector.stop()
        for line in collector.lines():
            logging.getLogger(__name__).info("%s", line)


if __name__ == "__main__":
    main()
