"""CLI entry point that emits sample metrics to a StatsD collector."""

import argparse
import logging
import random
import sys
import time

from statsd_client.config import create_client, load_config

logger = logging.getLogger(__name__)

SAMPLE_ROUTES = ["-", "users", "users.profile", "orders", "health"]


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(description="StatsD sample emitter")
    parser.add_argument("--count", type=int, default=20, help="Number of iterations")
    parser.add_argument("--interval", type=float, default=0.1, help="Seconds between iterations")
    args, _ = parser.parse_known_args(argv)

    config = load_config(argv)
    with create_client(config) as client:
        for i in range(args.count):
            route = random.choice(SAMPLE_ROUTES)
            client.increment(f"{route}.request")
            with client.record(f"{route}.time"):
                time.sleep(random.uniform(0, 0.02))
            client.gauge("queue.depth", random.randint(-5, 50))
            client.unique("users.active", random.randint(1, 10))
            client.histogram("payload.bytes", random.randint(100, 4000))
            if args.interval > 0 and i < args.count - 1:
                time.sleep(args.interval)
        logger.info("Emitted %d iterations of sample metrics", args.count)


if __name__ == "__main__":
    main()
