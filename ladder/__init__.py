"""
Level ladder and domain rating engine.

Pure, synchronous scoring logic for a residential youth program:

  * level_engine   — level lookup, privileges, level-up / demotion
  * scoring        — 0–4 domain score normalization at the storage boundary
  * weekly_dedupe  — one weekly eval per youth per ISO week
  * aggregator     — domain averages over caller-supplied record sets
  * trends         — improving / declining / stable classification

Persistence lives behind the protocols in `ladder.ports`.
"""

__version__ = "1.0.0"
