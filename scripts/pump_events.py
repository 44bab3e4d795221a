"""Synthetic traffic for the order tracking flow.

Each worker repeats the scenario an operator would do by hand against a
running server:

1. create an order in ``processing``,
2. attach tracking (sometimes only half of it),
3. move the order to a random next status,
4. open the customer order page.

With both tracking values present the server is expected to answer step 3
with ``completed``; the generator counts how often that happens so the
auto-complete rule can be watched from the outside (and from the RabbitMQ
consumer in ``scripts/consumer.py``).

Knobs:

* HTTP_BASE_URL: base URL of the API, e.g. http://localhost:8000
* HTTP_WORKERS: number of concurrent workers (default 2)
* HTTP_SLEEP: pause between scenarios per worker, in seconds
* HALF_TRACKING_RATE: share of scenarios that only set the tracking number
"""
from __future__ import annotations

import os
import random
import string
import threading
import time
from collections import Counter
from typing import Dict
from urllib.parse import urljoin

import requests

HTTP_BASE_URL = os.getenv("HTTP_BASE_URL", "http://localhost:8000")
HTTP_WORKERS = int(os.getenv("HTTP_WORKERS", "2"))
HTTP_DELAY = float(os.getenv("HTTP_SLEEP", "0.3"))
HALF_TRACKING_RATE = float(os.getenv("HALF_TRACKING_RATE", "0.2"))

NEXT_STATUSES = ["on-hold", "processing", "completed", "cancelled", "refunded", "failed"]

STATS: Counter = Counter()
STATS_LOCK = threading.Lock()


def rand_order_id(prefix: str = "ORD", length: int = 6) -> str:
    return f"{prefix}-" + "".join(random.choices(string.ascii_uppercase + string.digits, k=length))


def run_flow(session: requests.Session, base_url: str, half_tracking: bool = False) -> Dict[str, str]:
    """Runs one scenario and returns what the server answered at each step."""
    order_id = rand_order_id()
    tracking_number = "1Z" + "".join(random.choices(string.digits, k=8))
    tracking = {"tracking_number": tracking_number}
    if not half_tracking:
        tracking["tracking_link"] = f"https://carrier.example/track/{tracking_number}"

    resp = session.post(urljoin(base_url, "/orders"), json={"id": order_id, "status": "processing"}, timeout=5)
    resp.raise_for_status()

    resp = session.put(urljoin(base_url, f"/orders/{order_id}/tracking"), json=tracking, timeout=5)
    resp.raise_for_status()

    requested = random.choice(NEXT_STATUSES)
    resp = session.put(urljoin(base_url, f"/orders/{order_id}/status"), json={"status": requested}, timeout=5)
    resp.raise_for_status()
    final_status = resp.json().get("status", "")

    page = session.get(urljoin(base_url, f"/account/orders/{order_id}"), timeout=5)
    page.raise_for_status()

    return {
        "order_id": order_id,
        "requested": requested,
        "final": final_status,
        "tracking_on_page": "yes" if tracking_number in page.text else "no",
    }


def http_worker(name: str, stop: threading.Event) -> None:
    session = requests.Session()
    while not stop.is_set():
        try:
            result = run_flow(session, HTTP_BASE_URL, half_tracking=random.random() < HALF_TRACKING_RATE)
            key = "autocompleted" if result["final"] == "completed" and result["requested"] != "completed" else "kept"
            with STATS_LOCK:
                STATS[key] += 1
            print(f"[http:{name}] {result}")
        except requests.RequestException as exc:
            with STATS_LOCK:
                STATS["errors"] += 1
            print(f"[http:{name}] error: {exc}")
        finally:
            time.sleep(HTTP_DELAY)


def main() -> None:
    stop = threading.Event()
    threads = [
        threading.Thread(target=http_worker, name=f"http-{idx}", args=(f"w{idx}", stop), daemon=True)
        for idx in range(HTTP_WORKERS)
    ]
    for thread in threads:
        thread.start()
    print(f"[info] {HTTP_WORKERS} workers against {HTTP_BASE_URL}. Ctrl+C to stop.")

    try:
        while True:
            time.sleep(5)
            with STATS_LOCK:
                print(f"[info] {dict(STATS)}")
    except KeyboardInterrupt:
        print("\n[info] Stopped by user")
    finally:
        stop.set()
        for thread in threads:
            thread.join(timeout=1.0)


if __name__ == "__main__":
    main()
