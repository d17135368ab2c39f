"""
Rankflow: scheduled crawling of trending-keyword rankings.

The package polls several Korean ranking sites through a Selenium
browser session, folds the results into real-time, daily and weekly
rankings kept in Redis, and notifies downstream keyword and alarm
collaborators once the rollups are written.

The high‑level flow is:

1. **crawl** – Own the browser driver for one tick and fetch the
   ranked keywords of each configured source.
2. **store** – Accumulate per-source snapshots and merge them into
   total rankings keyed by period type.
3. **schedule** – Decide which task set a tick must run, retry flaky
   crawls with a fixed backoff and drive the whole sequence from two
   recurring triggers.
4. **cli** – Command line entry point wiring together the above
   components.
"""

__version__ = "0.1.0"
