# Example host: starts the REPL on the default port and ticks it every 100 ms.
#
# Connect with e.g.
#   nc localhost 8172
#   {"type":"evaluate","expression":"counter"}
import logging

import hostrepl
from hostrepl.driver import TickDriver

counter = 0


def frame():
    global counter
    counter += 1
    hostrepl.tick()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[hostrepl] %(message)s")
    if not hostrepl.start({"port": 8172, "timeout": 0}):
        raise SystemExit("Failed to start REPL server")
    try:
        TickDriver(frame, interval=0.1).run()
    except KeyboardInterrupt:
        pass
    finally:
        hostrepl.stop()
